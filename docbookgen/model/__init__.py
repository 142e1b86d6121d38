"""Documentation model consumed by the DocBook generator.

The model is an arena of typed nodes (:mod:`docbookgen.model.nodes`) owned by
a :class:`NodeStore`, which also answers naming, file and link questions.
:func:`load_model` builds a store from a YAML description, and
:class:`Sections` groups an aggregate's members for details output.

Examples
--------
>>> from docbookgen.model import build_model
>>> store = build_model(
...     {"nodes": [{"key": "foo", "kind": "class", "name": "Foo"}]}
... )
>>> store.file_name(store.find_class("Foo"))
'foo.xml'
"""

from .loader import ModelError, build_model, load_model
from .nodes import (
    Access,
    Aggregate,
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
from .sections import Section, Sections, SectionStyle
from .store import NodeStore

__all__ = [
    "Access",
    "Aggregate",
    "ClassNode",
    "CollectionNode",
    "Doc",
    "EnumItem",
    "EnumNode",
    "ExampleNode",
    "FunctionNode",
    "HeaderNode",
    "Metaness",
    "ModelError",
    "NamespaceNode",
    "NavLink",
    "Node",
    "NodeKind",
    "NodeStore",
    "PageNode",
    "Parameter",
    "PropertyNode",
    "ProxyNode",
    "QmlBasicTypeNode",
    "QmlPropertyNode",
    "QmlTypeNode",
    "RelatedClass",
    "Section",
    "SectionStyle",
    "Sections",
    "SharedCommentNode",
    "Status",
    "ThreadSafeness",
    "TypedefNode",
    "VariableNode",
    "Virtualness",
    "build_model",
    "load_model",
]
