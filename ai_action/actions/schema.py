"""Schema description and translation for structured output.

Actions describe their expected structured output with a ``SchemaNode``
tree, or with the equivalent plain JSON-Schema-like dict. Before a
structured provider call the tree is translated into the typed form Pydantic
AI accepts as ``output_type``:

- object  -> a pydantic model created with ``pydantic.create_model``
- array   -> ``List[<element>]`` (``List[Any]`` without an element schema)
- integer -> ``int``, number -> ``float``, boolean -> ``bool``
- string  -> ``str``, or ``Literal[...]`` when an enum is given

Unknown or missing type tags translate to ``str``. Malformed schema input
therefore degrades to a string leaf instead of failing the whole call, which
also hides typos in type names.
"""

from __future__ import annotations

import keyword
import re
from typing import Any, Collection, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, create_model

ROOT_MODEL_NAME = "StructuredOutput"


class SchemaNode(BaseModel):
    """Declarative description of one node of a structured output.

    Attributes:
        type: object, array, string, number, integer or boolean; anything else reads as string
        properties: Named child nodes of an object, in declaration order
        required: Names of the object properties that must be present
        items: Element node of an array
        enum: Allowed values of a string
        description: Human-readable description forwarded to the model
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(default="string", description="Node type tag")
    properties: Dict[str, "SchemaNode"] = Field(default_factory=dict, description="Object properties")
    required: List[str] = Field(default_factory=list, description="Required property names")
    items: Optional["SchemaNode"] = Field(default=None, description="Array element node")
    enum: Optional[List[Any]] = Field(default=None, description="Allowed string values")
    description: Optional[str] = Field(default=None, description="Node description")

    @classmethod
    def from_dict(cls, schema: Mapping[str, Any]) -> "SchemaNode":
        """Build a node tree from a plain JSON-Schema-like mapping.

        Values of the wrong shape are dropped rather than rejected.
        """
        node_type = schema.get("type")
        if not isinstance(node_type, str):
            node_type = "string"

        required = schema.get("required")
        if isinstance(required, str):
            required = [required]
        elif not isinstance(required, (list, tuple)):
            required = []

        properties: Dict[str, SchemaNode] = {}
        raw_properties = schema.get("properties")
        if isinstance(raw_properties, Mapping):
            for name, prop in raw_properties.items():
                properties[str(name)] = cls.from_dict(prop) if isinstance(prop, Mapping) else cls()

        items = schema.get("items")
        enum = schema.get("enum")
        description = schema.get("description")

        return cls(
            type=node_type,
            properties=properties,
            required=[str(name) for name in required],
            items=cls.from_dict(items) if isinstance(items, Mapping) else None,
            enum=list(enum) if isinstance(enum, (list, tuple)) else None,
            description=description if isinstance(description, str) else None,
        )

    @property
    def required_names(self) -> frozenset:
        return frozenset(self.required)


SchemaNode.model_rebuild()


def _model_name(parent: str, prop: str) -> str:
    suffix = re.sub(r"\W+", "_", prop).strip("_").title().replace("_", "")
    return f"{parent}_{suffix or 'Field'}"


def _field_name(prop: str, index: int, taken: Collection[str] = ()) -> str:
    """Python attribute name for an object property.

    Names already in ``taken`` are never returned, so two properties cannot
    collapse into one field.
    """
    if (
        prop not in taken
        and prop.isidentifier()
        and not keyword.iskeyword(prop)
        and not prop.startswith(("_", "model_"))
        and not hasattr(BaseModel, prop)
    ):
        return prop
    candidate = f"field_{index}"
    suffix = 1
    while candidate in taken:
        candidate = f"field_{index}_{suffix}"
        suffix += 1
    return candidate


class SchemaTranslator:
    """Recursive translator from ``SchemaNode`` to Pydantic AI output types.

    Pure: translation has no side effects and performs no I/O.
    """

    def __init__(self, root_name: str = ROOT_MODEL_NAME) -> None:
        self.root_name = root_name

    def translate(self, node: Union[SchemaNode, Mapping[str, Any]]) -> Any:
        if not isinstance(node, SchemaNode):
            node = SchemaNode.from_dict(node)
        return self._translate(node, self.root_name)

    def _translate(self, node: SchemaNode, name: str) -> Any:
        if node.type == "object":
            return self._object(node, name)
        if node.type == "array":
            return self._array(node, name)
        if node.type == "integer":
            return int
        if node.type == "number":
            return float
        if node.type == "boolean":
            return bool
        return self._string(node)

    def _object(self, node: SchemaNode, name: str) -> type:
        required = node.required_names
        fields: Dict[str, Any] = {}

        for index, (prop, prop_node) in enumerate(node.properties.items()):
            annotation = self._translate(prop_node, _model_name(name, prop))
            field_name = _field_name(prop, index, fields)
            alias = prop if field_name != prop else None

            if prop in required:
                fields[field_name] = (annotation, Field(..., alias=alias, description=prop_node.description))
            else:
                fields[field_name] = (
                    Optional[annotation],
                    Field(None, alias=alias, description=prop_node.description),
                )

        return create_model(name, __doc__=node.description, **fields)

    def _array(self, node: SchemaNode, name: str) -> Any:
        if node.items is None:
            return List[Any]
        return List[self._translate(node.items, f"{name}Item")]

    def _string(self, node: SchemaNode) -> Any:
        if node.enum:
            return Literal[tuple(node.enum)]
        return str


def translate_schema(node: Union[SchemaNode, Mapping[str, Any]]) -> Any:
    """Translate ``node`` with a default ``SchemaTranslator``."""
    return SchemaTranslator().translate(node)
