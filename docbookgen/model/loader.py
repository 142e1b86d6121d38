"""Load a documentation model from YAML into a :class:`NodeStore`.

The model file lists nodes in document order. Each entry names its ``kind``
and a unique ``key``; relations (parent, bases, accessors, collection
members, shared comments) refer to other entries by key. Marked-up text is a
list of atoms, each written as ``[kind, *strings]`` or as a bare string for
a string atom.

Example
-------
.. code-block:: yaml

    images:
      logo.png: images/logo.png
    nodes:
      - key: qstring
        kind: class
        name: QString
        brief: The QString class provides a Unicode character string.
        body:
          - [para-left]
          - Hello
          - [para-right]
      - key: qstring-size
        kind: function
        parent: qstring
        name: size
        return_type: int
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from docbookgen.atoms import AtomKind, Text
from docbookgen.diagnostics import Location
from docbookgen.model.nodes import (
    Access,
    ClassNode,
    CollectionNode,
    Doc,
    EnumItem,
    EnumNode,
    ExampleNode,
    FunctionNode,
    HeaderNode,
    Metaness,
    NamespaceNode,
    NavLink,
    Node,
    NodeKind,
    PageNode,
    Parameter,
    PropertyNode,
    ProxyNode,
    QmlBasicTypeNode,
    QmlPropertyNode,
    QmlTypeNode,
    RelatedClass,
    SharedCommentNode,
    Status,
    ThreadSafeness,
    TypedefNode,
    VariableNode,
    Virtualness,
)
from docbookgen.model.store import NodeStore


class ModelError(ValueError):
    """Raised when a documentation model file is invalid."""


_NODE_CLASSES: dict[NodeKind, type[Node]] = {
    NodeKind.CLASS: ClassNode,
    NodeKind.STRUCT: ClassNode,
    NodeKind.UNION: ClassNode,
    NodeKind.NAMESPACE: NamespaceNode,
    NodeKind.HEADER: HeaderNode,
    NodeKind.PROXY: ProxyNode,
    NodeKind.QML_TYPE: QmlTypeNode,
    NodeKind.QML_BASIC_TYPE: QmlBasicTypeNode,
    NodeKind.PAGE: PageNode,
    NodeKind.EXTERNAL_PAGE: PageNode,
    NodeKind.EXAMPLE: ExampleNode,
    NodeKind.COLLECTION_GROUP: CollectionNode,
    NodeKind.COLLECTION_MODULE: CollectionNode,
    NodeKind.COLLECTION_QML_MODULE: CollectionNode,
    NodeKind.FUNCTION: FunctionNode,
    NodeKind.ENUM: EnumNode,
    NodeKind.TYPEDEF: TypedefNode,
    NodeKind.PROPERTY: PropertyNode,
    NodeKind.VARIABLE: VariableNode,
    NodeKind.QML_PROPERTY: QmlPropertyNode,
    NodeKind.SHARED_COMMENT: SharedCommentNode,
    NodeKind.PROPERTY_GROUP: SharedCommentNode,
}

_ENUM_FIELDS: dict[str, type[typ.Any]] = {
    "access": Access,
    "status": Status,
    "thread_safeness": ThreadSafeness,
    "metaness": Metaness,
    "virtualness": Virtualness,
}

# Fields holding node ids, resolved from keys once every node exists.
_ID_FIELDS = frozenset(
    {
        "qml_element_id",
        "documented_in_id",
        "qml_base_id",
        "class_node_id",
        "flags_type_id",
        "associated_enum_id",
        "reimplemented_from_id",
    }
)
_ID_LIST_FIELDS = frozenset(
    {"members", "collective", "getter_ids", "setter_ids", "resetter_ids", "notifier_ids"}
)
_MANAGED_FIELDS = frozenset(
    {
        "name",
        "kind",
        "node_id",
        "parent_id",
        "doc",
        "children",
        "nav_links",
        "shared_comment_id",
        "bases",
        "derived",
        "parameters",
        "items",
        "associated_property_ids",
    }
)
_ALIASES = {
    "getters": "getter_ids",
    "setters": "setter_ids",
    "resetters": "resetter_ids",
    "notifiers": "notifier_ids",
    "thread_safety": "thread_safeness",
    "qml_base": "qml_base_id",
    "qml_element": "qml_element_id",
    "class_node": "class_node_id",
    "documented_in": "documented_in_id",
    "flags": "flags_type_id",
    "associated_enum": "associated_enum_id",
    "reimplements": "reimplemented_from_id",
}
_DOC_KEYS = frozenset({"body", "brief", "also", "legalese", "location", "meta"})
_ENTRY_KEYS = frozenset({"key", "parent"}) | _DOC_KEYS


def load_model(path: Path) -> NodeStore:
    """Load the YAML documentation model at ``path``.

    Raises
    ------
    FileNotFoundError
        If the model file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ModelError
        If a node entry is malformed or refers to an unknown key.
    """
    if not path.exists():
        msg = f"Model file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return build_model(dict(loaded), base=path.parent)


def build_model(
    raw: typ.Mapping[str, typ.Any],
    *,
    base: Path | None = None,
    use_output_subdirs: bool = False,
) -> NodeStore:
    """Build a :class:`NodeStore` from an already parsed model mapping."""
    store = NodeStore(use_output_subdirs=use_output_subdirs)
    root = base if base is not None else Path()
    images = raw.get("images") or {}
    if not isinstance(images, dict):
        msg = "'images' must map image names to files."
        raise ModelError(msg)
    for name, file_path in images.items():
        store.register_image(str(name), str(root / str(file_path)))

    entries = raw.get("nodes") or []
    if not isinstance(entries, list):
        msg = "'nodes' must be a list of node entries."
        raise ModelError(msg)
    builder = _ModelBuilder(store)
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            msg = f"Node entry {index} must be a mapping."
            raise ModelError(msg)
        builder.add(entry)
    builder.resolve()
    return store


@dc.dataclass(slots=True)
class _ModelBuilder:
    """Two-pass builder: create nodes in order, then resolve key references."""

    store: NodeStore
    keys: dict[str, Node] = dc.field(default_factory=dict)
    pending: list[tuple[Node, dict[str, typ.Any]]] = dc.field(default_factory=list)

    def add(self, entry: dict[str, typ.Any]) -> None:
        key = _optional_str(entry.get("key")) or _optional_str(entry.get("name"))
        if not key:
            msg = "Every node entry needs a 'key' or a 'name'."
            raise ModelError(msg)
        if key in self.keys:
            msg = f"Duplicate node key '{key}'."
            raise ModelError(msg)
        kind = _parse_enum(NodeKind, entry.get("kind"), key, "kind")
        parent_key = _optional_str(entry.get("parent"))
        parent = self.keys.get(parent_key) if parent_key else None
        if parent_key and parent is None:
            msg = f"Node '{key}' names parent '{parent_key}' before it is defined."
            raise ModelError(msg)

        node_class = _NODE_CLASSES[kind]
        node = node_class(_optional_str(entry.get("name")), kind=kind)
        node.doc = _build_doc(entry, key)
        references: dict[str, typ.Any] = {}
        for name, value in entry.items():
            if name in _ENTRY_KEYS or name in {"name", "kind"}:
                continue
            _apply_field(node, _ALIASES.get(name, name), value, key, references)
        self.store.add(node, parent)
        self.keys[key] = node
        if references:
            self.pending.append((node, references))

    def lookup(self, key: object, owner: Node) -> Node:
        node = self.keys.get(str(key))
        if node is None:
            msg = f"Node '{owner.name}' refers to unknown node '{key}'."
            raise ModelError(msg)
        return node

    def resolve(self) -> None:
        for node, references in self.pending:
            for name, value in references.items():
                self._resolve_reference(node, name, value)
        for node in self.store.nodes():
            if isinstance(node, ClassNode):
                for base in node.bases:
                    if base.node_id is None:
                        continue
                    base_node = self.store.get(base.node_id)
                    if isinstance(base_node, ClassNode):
                        base_node.derived.append(RelatedClass(node.node_id, base.access))

    def _resolve_reference(self, node: Node, name: str, value: typ.Any) -> None:
        match name:
            case "bases":
                node.bases = [self._related_class(node, item) for item in value]
            case "associated_properties" if isinstance(node, FunctionNode):
                for key in value:
                    node.associated_property_ids.append(self.lookup(key, node).node_id)
            case _ if name in _ID_FIELDS:
                setattr(node, name, self.lookup(value, node).node_id)
            case _ if name in _ID_LIST_FIELDS:
                ids = [self.lookup(key, node).node_id for key in value]
                setattr(node, name, ids)
                if name == "collective":
                    for member_id in ids:
                        self.store.get(member_id).shared_comment_id = node.node_id
                elif name.endswith("_ids"):
                    for member_id in ids:
                        member = self.store.get(member_id)
                        if isinstance(member, FunctionNode):
                            member.associated_property_ids.append(node.node_id)

    def _related_class(self, owner: Node, item: typ.Any) -> RelatedClass:
        if isinstance(item, str):
            item = {"class": item}
        if not isinstance(item, dict):
            msg = f"Base class entries of '{owner.name}' must be names or mappings."
            raise ModelError(msg)
        target = _optional_str(item.get("class"))
        access = _parse_enum(Access, item.get("access", "public"), owner.name, "access")
        node = self.keys.get(target)
        if node is None:
            node = self.store.find_class(target)
        return RelatedClass(node.node_id if node is not None else None, access, target)


def _optional_str(value: object | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_enum(enum_type: type[typ.Any], value: object, key: str, field: str) -> typ.Any:
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as exc:
        msg = f"Node '{key}' has invalid {field} {value!r}."
        raise ModelError(msg) from exc


def _build_text(value: object, key: str, *, paragraph: bool = False) -> Text:
    """Build an atom chain from a string or a list of atom specifications."""
    match value:
        case None:
            return Text()
        case str() if paragraph:
            return Text.from_atoms(
                (AtomKind.PARA_LEFT,), (AtomKind.STRING, value), (AtomKind.PARA_RIGHT,)
            )
        case str():
            return Text.from_string(value)
        case list():
            text = Text()
            for item in value:
                match item:
                    case str():
                        text.append(AtomKind.STRING, item)
                    case [str() as kind, *strings]:
                        try:
                            text.append(kind, *(str(s) for s in strings))
                        except ValueError as exc:
                            msg = f"Node '{key}' uses unknown atom kind '{kind}'."
                            raise ModelError(msg) from exc
                    case _:
                        msg = f"Node '{key}' has a malformed atom {item!r}."
                        raise ModelError(msg)
            return text
        case _:
            msg = f"Node '{key}' text must be a string or a list of atoms."
            raise ModelError(msg)


def _build_doc(entry: dict[str, typ.Any], key: str) -> Doc:
    doc = Doc(
        body=_build_text(entry.get("body"), key, paragraph=True),
        brief=_build_text(entry.get("brief"), key),
        also_list=[_build_text(item, key) for item in entry.get("also") or []],
        legalese=_build_text(entry.get("legalese"), key),
    )
    location = entry.get("location")
    if isinstance(location, dict):
        doc.location = Location(
            _optional_str(location.get("file")),
            int(location.get("line", 0)),
            int(location.get("column", 0)),
        )
    elif location:
        doc.location = Location(_optional_str(location))
    meta = entry.get("meta") or {}
    if not isinstance(meta, dict):
        msg = f"Node '{key}' meta commands must be a mapping."
        raise ModelError(msg)
    for name, values in meta.items():
        items = values if isinstance(values, list) else [values]
        doc.metadata[str(name)] = [_optional_str(item) for item in items]
    return doc


def _apply_field(
    node: Node, name: str, value: typ.Any, key: str, references: dict[str, typ.Any]
) -> None:
    """Set one node attribute from its YAML value.

    Key references are stored in ``references`` for the resolution pass.
    """
    if name == "nav":
        node.nav_links = _build_nav_links(value, key)
        return
    if name == "enum_items":
        node.doc.enum_item_names = [str(item) for item in value]
        return
    if name == "omitted_enum_items":
        node.doc.omitted_enum_item_names = [str(item) for item in value]
        return
    if name in {"bases", "associated_properties"} or name in _ID_FIELDS | _ID_LIST_FIELDS:
        references[name] = value
        return
    if isinstance(node, FunctionNode) and name == "parameters":
        node.parameters = [_build_parameter(item, key) for item in value]
        return
    if isinstance(node, EnumNode) and name == "items":
        node.items = [_build_enum_item(item, key) for item in value]
        return
    fields = {field.name: field for field in dc.fields(node)}
    if name not in fields or name in _MANAGED_FIELDS:
        msg = f"Node '{key}' has unknown attribute '{name}'."
        raise ModelError(msg)
    if name in _ENUM_FIELDS:
        setattr(node, name, _parse_enum(_ENUM_FIELDS[name], value, key, name))
        return
    current = getattr(node, name)
    if isinstance(current, list):
        if not isinstance(value, list):
            value = [value]
        setattr(node, name, [str(item) for item in value])
    elif isinstance(current, bool):
        if not isinstance(value, bool):
            msg = f"Node '{key}' attribute '{name}' must be true or false."
            raise ModelError(msg)
        setattr(node, name, value)
    elif isinstance(current, int):
        setattr(node, name, int(value))
    else:
        setattr(node, name, "" if value is None else str(value))


def _build_nav_links(value: object, key: str) -> dict[str, NavLink]:
    if not isinstance(value, dict):
        msg = f"Node '{key}' navigation links must be a mapping."
        raise ModelError(msg)
    links: dict[str, NavLink] = {}
    for role, target in value.items():
        if role not in {"previous", "next", "start"}:
            msg = f"Node '{key}' has unknown navigation link '{role}'."
            raise ModelError(msg)
        if isinstance(target, dict):
            link = NavLink(_optional_str(target.get("target")), _optional_str(target.get("title")))
        else:
            link = NavLink(_optional_str(target), _optional_str(target))
        links[role] = link
    return links


def _build_parameter(item: object, key: str) -> Parameter:
    if isinstance(item, str):
        return Parameter(item)
    if not isinstance(item, dict):
        msg = f"Node '{key}' parameters must be strings or mappings."
        raise ModelError(msg)
    return Parameter(
        _optional_str(item.get("type")),
        _optional_str(item.get("name")),
        _optional_str(item.get("default")),
    )


def _build_enum_item(item: object, key: str) -> EnumItem:
    if isinstance(item, str):
        return EnumItem(item)
    if not isinstance(item, dict) or not item.get("name"):
        msg = f"Node '{key}' enum items need a name."
        raise ModelError(msg)
    return EnumItem(
        _optional_str(item.get("name")),
        _optional_str(item.get("value")),
        _optional_str(item.get("since")),
    )


__all__ = ["ModelError", "build_model", "load_model"]
