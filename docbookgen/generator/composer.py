"""Compose complete DocBook documents for pages and aggregates.

:class:`PageComposer` owns the document lifecycle (one ``article`` per output
file) and the page layouts: C++ reference pages for classes, namespaces and
headers, QML type pages, text and example pages, collection pages and proxy
pages. Marked-up text inside those pages is delegated to the atom
interpreter, signatures to the synopsis renderer and generated listings to
the list renderer.
"""

from __future__ import annotations

import contextlib
import logging
import typing as typ
from urllib.parse import urlsplit

from docbookgen import naming
from docbookgen._constants import DOCBOOK_VERSION
from docbookgen.atoms import FORMATTING_LINK, AtomKind, Text
from docbookgen.generator.base import GeneratorComponent
from docbookgen.generator.listing import example_file_name, listing_text, read_example_file
from docbookgen.generator.output import GeneratedDocument
from docbookgen.generator.state import GenerationState
from docbookgen.model.nodes import (
    Aggregate,
    ClassNode,
    CollectionNode,
    EnumNode,
    ExampleNode,
    FunctionNode,
    HeaderNode,
    Metaness,
    NamespaceNode,
    NodeKind,
    PageNode,
    PropertyNode,
    ProxyNode,
    QmlBasicTypeNode,
    QmlPropertyNode,
    QmlTypeNode,
    SharedCommentNode,
    Status,
    ThreadSafeness,
)
from docbookgen.model.sections import Section, Sections, SectionStyle

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.model.nodes import Node
    from docbookgen.model.store import NodeStore

logger = logging.getLogger(__name__)

EXAMPLE_PATH_PLACEHOLDER = "\\1"

_NAV_ROLES = (("previous", "prev"), ("next", "next"), ("start", "start"))

_SPECIAL_FUNCTION_SENTENCES = {
    Metaness.COPY_CTOR: "Copy constructor.",
    Metaness.MOVE_CTOR: "Move-copy constructor.",
    Metaness.COPY_ASSIGN: "Copy-assignment constructor.",
    Metaness.MOVE_ASSIGN: "Move-assignment constructor.",
}

_ACCESSOR_ROLES = {
    "getter": "Getter function ",
    "setter": "Setter function ",
    "resetter": "Resetter function ",
    "notifier": "Notifier signal ",
}

_OBSOLETE_ADVICE = (
    " They are provided to keep old source code working. "
    "We strongly advise against using them in new code."
)

_GENERIC_COLLECTION_INTRO = (
    "Each function or type documented here is related to a class or namespace "
    "that is documented in a different module. The reference page for that "
    "class or namespace will link to the function or type on this page."
)


def overloaded_signal_code(store: NodeStore, node: Node) -> str:
    """Return a ``connect`` snippet for a signal overloaded in its class.

    Returns an empty string for anything but an overloaded signal.

    Examples
    --------
    >>> from docbookgen.model.store import NodeStore
    >>> from docbookgen.model.nodes import ClassNode, Parameter
    >>> store = NodeStore()
    >>> box = store.add(ClassNode("QSpinBox"))
    >>> first = store.add(
    ...     FunctionNode("valueChanged", metaness=Metaness.SIGNAL,
    ...                  parameters=[Parameter("int", "i")]), box)
    >>> _ = store.add(
    ...     FunctionNode("valueChanged", metaness=Metaness.SIGNAL, overload_number=1,
    ...                  parameters=[Parameter("const QString &", "text")]), box)
    >>> print(overloaded_signal_code(store, first))
    connect(spinBox, QOverload<int>::of(&QSpinBox::valueChanged),
        [=](int i){ /* ... */ });
    """
    if not isinstance(node, FunctionNode) or not node.is_signal:
        return ""
    parent = store.parent(node)
    if parent is None:
        return ""
    overloads = [
        child
        for child in store.children(parent)
        if isinstance(child, FunctionNode) and child.is_signal and child.name == node.name
    ]
    if len(overloads) < 2 and not node.is_overload:
        return ""
    object_name = parent.name
    if len(object_name) >= 2:
        object_name = object_name.removeprefix("Q")
        object_name = object_name[:1].lower() + object_name[1:]
    types = ", ".join(parameter.type for parameter in node.parameters)
    declarations = ", ".join(parameter.signature() for parameter in node.parameters)
    return (
        f"connect({object_name}, QOverload<{types}>::of(&{parent.name}::{node.name}),\n"
        f"    [=]({declarations}){{ /* ... */ }});"
    )


class PageComposer(GeneratorComponent):
    """Write whole documents: headers, requisites, member details and footers."""

    # Document lifecycle

    def start_document(self, node: Node, file_name: str | None = None) -> None:
        """Start a fresh ``article`` for ``node`` with per-document state reset."""
        name = file_name or self.store.file_name(node)
        self.generator.state = GenerationState(file_name=name, node=node)
        attributes = {"version": DOCBOOK_VERSION}
        if self.config.natural_language:
            attributes["xml:lang"] = self.config.natural_language
        self.writer.start_element("article", attributes)
        self.writer.new_line()

    def end_document(self) -> GeneratedDocument:
        """Close the article, serialize it and hand it to the output sink."""
        self.generate_footer()
        if self.writer.depth == 1:
            self.writer.end_element()  # article
        document = GeneratedDocument(self.state.file_name, self.writer.finish())
        self.generator.emit(document)
        return document

    def generate_footer(self) -> None:
        self.generator.interpreter.close_text_sections()

    @contextlib.contextmanager
    def _nested_document(self) -> cabc.Iterator[None]:
        """Write another document while the current one is still open."""
        saved = self.generator.state
        try:
            yield
        finally:
            self.generator.state = saved

    # Small shared shapes

    def _anchor(self, node: Node) -> str:
        """Return ``node``'s anchor and reserve it in the document's registry."""
        anchor = self.store.anchor(node)
        if anchor and anchor not in self.state.refs:
            self.state.refs.claim(anchor)
        return anchor

    def _start_section(self, ref: str, title: str) -> None:
        self.writer.start_section(self.state.refs.register(ref), title)

    def _para(self, text: str) -> None:
        self.writer.text_element("para", text)
        self.writer.new_line()

    def _text_para(self, text: Text, relative: Node | None) -> None:
        self.writer.start_element("para")
        self.generator.interpreter.generate_text(text, relative)
        self.writer.end_element()  # para
        self.writer.new_line()

    def _link_to(self, node: Node | None, relative: Node | None, text: str) -> None:
        href = self.store.link_for_node(node, relative) if node is not None else ""
        self.generator.links.generate_simple_link(href, text)

    @staticmethod
    def _terminated(text: Text) -> Text:
        """Return a copy of ``text`` ending in a period."""
        result = Text().extend(text)
        if result and not result.to_plain().rstrip().endswith("."):
            result.append_string(".")
        return result

    # Header

    def generate_header(self, title: str, subtitle: str, node: Node | None) -> None:
        """Write the ``info`` block: titles, product data, navigation and abstract."""
        writer = self.writer
        writer.start_element("info")
        writer.new_line()
        writer.text_element("title", title)
        writer.new_line()
        for tag, value in (
            ("subtitle", subtitle),
            ("productname", self.config.project),
            ("edition", self.config.build_version),
            ("titleabbrev", self.config.description),
        ):
            if value:
                writer.text_element(tag, value)
                writer.new_line()
        if node is not None:
            self._generate_navigation(node)
            self._generate_abstract(node)
        writer.end_element()  # info
        writer.new_line()

    def _generate_navigation(self, node: Node) -> None:
        for role, label in _NAV_ROLES:
            link = node.nav_links.get(role)
            if link is None:
                continue
            target, _ = self.store.find_node_for_target(link.target, node)
            if target is None or target is node:
                to, title = link.target, link.title
            else:
                to, title = self.store.full_document_location(target), target.full_title
            if link.target == link.title and title:
                link_label = title
            else:
                link_label = link.title
            self.writer.start_element("extendedlink")
            self.writer.empty_element(
                "link", {"xlink:to": to, "xlink:title": label, "xlink:label": link_label}
            )
            self.writer.end_element()  # extendedlink
            self.writer.new_line()

    def _generate_abstract(self, node: Node) -> None:
        writer = self.writer
        writer.start_element("abstract")
        writer.new_line()
        brief = self._abstract_brief(node)
        generated = False
        if not brief.is_empty:
            self._text_para(self._terminated(brief), node)
            generated = True
        generated |= self.generate_status(node)
        generated |= self.generate_since(node)
        generated |= self.generate_thread_safeness(node)
        if not generated:
            self._para(f"{self.config.description}.")
        writer.end_element()  # abstract
        writer.new_line()

    def _abstract_brief(self, node: Node) -> Text:
        if (
            isinstance(node, NamespaceNode)
            and not node.has_doc
            and node.documented_in_id is not None
        ):
            full = self.store.get(node.documented_in_id)
            return Text.from_atoms(
                (
                    AtomKind.STRING,
                    f"The {node.name} namespace includes the following elements from "
                    f"module {node.physical_module}. The full namespace is documented "
                    f"in module {full.physical_module}",
                ),
                (AtomKind.LINK_NODE, self.store.full_document_location(full)),
                (AtomKind.FORMATTING_LEFT, FORMATTING_LINK),
                (AtomKind.STRING, " here."),
                (AtomKind.FORMATTING_RIGHT, FORMATTING_LINK),
            )
        return node.doc.brief

    # Paragraph generators

    def generate_brief(self, node: Node) -> None:
        if not node.doc.brief.is_empty:
            self._text_para(self._terminated(node.doc.brief), node)

    def generate_since(self, node: Node) -> bool:
        if not node.since:
            return False
        modified = " or modified" if isinstance(node, EnumNode) else ""
        since = naming.format_since(node.since, self.config.project)
        self._para(f"This {naming.type_string(node)} was introduced{modified} in {since}.")
        return True

    def generate_status(self, node: Node) -> bool:
        """Write the status sentence for ``node``; return whether one was written."""
        writer = self.writer
        noun = naming.type_string(node)
        match node.status:
            case Status.PRELIMINARY:
                writer.start_element("para")
                writer.text_element(
                    "emphasis",
                    f"This {noun} is under development and is subject to change.",
                    {"role": "bold"},
                )
            case Status.DEPRECATED | Status.OBSOLETE:
                word = "deprecated" if node.status is Status.DEPRECATED else "obsolete"
                sentence = f"This {noun} is {word}."
                writer.start_element("para")
                if node.is_aggregate:
                    writer.text_element("emphasis", sentence, {"role": "bold"})
                else:
                    writer.characters(sentence)
                if node.status is Status.OBSOLETE:
                    writer.characters(
                        " It is provided to keep old source code working. "
                        "We strongly advise against using it in new code."
                    )
            case _:
                return False
        writer.end_element()  # para
        writer.new_line()
        return True

    def generate_thread_safeness(self, node: Node) -> bool:
        """Explain how reentrant or thread-safe ``node`` is.

        Aggregates also list the member functions whose safeness differs
        from their own.
        """
        safeness = self.store.thread_safeness(node)
        if safeness is ThreadSafeness.UNSPECIFIED:
            return False
        writer = self.writer
        links = self.generator.links
        _, reentrant_href = links.resolve("reentrant", node)
        _, thread_safe_href = links.resolve("thread-safe", node)
        noun = naming.type_string(node)

        if safeness is ThreadSafeness.NON_REENTRANT:
            writer.start_element("warning")
            writer.new_line()
            writer.start_element("para")
            writer.characters(f"This {noun} is not ")
            links.generate_simple_link(reentrant_href, "reentrant")
            writer.characters(".")
            writer.end_element()  # para
            writer.new_line()
            writer.end_element()  # warning
            writer.new_line()
            return True

        def safeness_link() -> None:
            if safeness is ThreadSafeness.THREAD_SAFE:
                links.generate_simple_link(thread_safe_href, "thread-safe")
            else:
                links.generate_simple_link(reentrant_href, "reentrant")

        writer.start_element("note")
        writer.new_line()
        writer.start_element("para")
        if not node.is_aggregate:
            writer.characters(f"This {noun} is ")
            safeness_link()
            writer.characters(".")
            writer.end_element()  # para
            writer.new_line()
        else:
            writer.characters(f"All functions in this {noun} are ")
            safeness_link()
            reentrant, thread_safe, non_reentrant = self._thread_safeness_exceptions(node)
            exceptions = bool(non_reentrant) or (
                bool(reentrant) if safeness is ThreadSafeness.THREAD_SAFE else bool(thread_safe)
            )
            if not exceptions or (
                safeness is ThreadSafeness.REENTRANT and thread_safe
            ):
                writer.characters(".")
                writer.end_element()  # para
                writer.new_line()
            else:
                writer.characters(" with the following exceptions:")
                writer.end_element()  # para
                writer.new_line()
                if safeness is ThreadSafeness.REENTRANT:
                    groups = [
                        ("These functions are not ", reentrant_href, "reentrant", non_reentrant),
                        ("These functions are also ", thread_safe_href, "thread-safe", thread_safe),
                    ]
                else:
                    groups = [
                        ("These functions are only ", reentrant_href, "reentrant", reentrant),
                        ("These functions are not ", reentrant_href, "reentrant", non_reentrant),
                    ]
                for lead, href, word, members in groups:
                    if not members:
                        continue
                    writer.start_element("para")
                    writer.characters(lead)
                    links.generate_simple_link(href, word)
                    writer.characters(":")
                    writer.end_element()  # para
                    writer.new_line()
                    self.generate_signature_list(members)
        writer.end_element()  # note
        writer.new_line()
        return True

    def _thread_safeness_exceptions(
        self, node: Node
    ) -> tuple[list[Node], list[Node], list[Node]]:
        reentrant: list[Node] = []
        thread_safe: list[Node] = []
        non_reentrant: list[Node] = []
        for child in self.store.children(node):
            if child.is_obsolete:
                continue
            match self.store.thread_safeness(child):
                case ThreadSafeness.REENTRANT:
                    reentrant.append(child)
                case ThreadSafeness.THREAD_SAFE:
                    thread_safe.append(child)
                case ThreadSafeness.NON_REENTRANT:
                    non_reentrant.append(child)
        return reentrant, thread_safe, non_reentrant

    def generate_signature_list(self, nodes: cabc.Iterable[Node]) -> None:
        writer = self.writer
        writer.start_element("itemizedlist")
        writer.new_line()
        for node in nodes:
            if isinstance(node, FunctionNode):
                label = node.signature(no_return=True)
            else:
                label = node.name
            writer.start_element("listitem")
            writer.new_line()
            writer.start_element("para")
            self.generator.links.generate_simple_link(
                self.store.full_document_location(node), label
            )
            writer.end_element()  # para
            writer.new_line()
            writer.end_element()  # listitem
            writer.new_line()
        writer.end_element()  # itemizedlist
        writer.new_line()

    # Body

    def _has_shared_doc(self, node: Node) -> bool:
        if node.shared_comment_id is None:
            return False
        return self.store.get(node.shared_comment_id).has_doc

    def generate_body(self, node: Node) -> None:
        """Write the documentation body of ``node``.

        Undocumented special member functions get a synthesised sentence.
        Example pages are followed by links to their files or project.
        """
        if not node.has_doc and not self._has_shared_doc(node):
            if isinstance(node, FunctionNode):
                sentence = self._special_function_sentence(node)
                if sentence:
                    self._para(sentence)
        elif not node.is_sharing_comment:
            if isinstance(node, FunctionNode) and node.reimplemented_from_id is not None:
                self.generate_reimplements_clause(node)
            generated = self.generator.interpreter.generate_text(node.doc.body, node)
            if not generated and isinstance(node, FunctionNode) and node.is_marked_reimp:
                return
        self.generate_required_links(node)

    def _special_function_sentence(self, node: FunctionNode) -> str:
        parent = self.store.parent(node)
        parent_name = parent.name if parent is not None else ""
        if node.is_dtor:
            sentence = f"Destroys the instance of {parent_name}."
            if node.is_virtual:
                sentence += " The destructor is virtual."
            return sentence
        if node.is_ctor:
            return f"Default constructs an instance of {parent_name}."
        return _SPECIAL_FUNCTION_SENTENCES.get(node.metaness, "")

    def generate_reimplements_clause(self, node: FunctionNode) -> None:
        if node.reimplemented_from_id is None:
            return
        parent = self.store.parent(node)
        if not isinstance(parent, ClassNode):
            return
        links = self.generator.links
        overridden = self.store.get(node.reimplemented_from_id)
        overridden_parent = self.store.parent(overridden)
        if (
            isinstance(overridden, FunctionNode)
            and not overridden.is_private
            and overridden_parent is not None
            and not overridden_parent.is_private
            and overridden.has_doc
        ):
            full_name = f"{overridden_parent.name}::{overridden.signature(no_return=True)}"
            self.writer.start_element("para")
            self.writer.characters("Reimplements: ")
            links.generate_full_name_as(overridden_parent, full_name, overridden)
            self.writer.characters(".")
            self.writer.end_element()  # para
            self.writer.new_line()
            return
        prop = self._overridden_property(parent, node)
        if prop is not None and prop.has_doc:
            owner = self.store.parent(prop)
            self.writer.start_element("para")
            self.writer.characters("Reimplements an access function for property: ")
            links.generate_full_name_as(owner, f"{owner.name}::{prop.name}", prop)
            self.writer.characters(".")
            self.writer.end_element()  # para
            self.writer.new_line()

    def _overridden_property(self, cls: ClassNode, node: FunctionNode) -> PropertyNode | None:
        """Find a base-class property accessed through a function named like ``node``."""
        pending = [base.node_id for base in cls.bases if base.node_id is not None]
        seen: set[int] = set()
        while pending:
            base_id = pending.pop(0)
            if base_id in seen:
                continue
            seen.add(base_id)
            base = self.store.get(base_id)
            for child in self.store.children(base):
                if not isinstance(child, PropertyNode):
                    continue
                accessors = (
                    child.getter_ids + child.setter_ids + child.resetter_ids + child.notifier_ids
                )
                if any(self.store.get(i).name == node.name for i in accessors):
                    return child
            if isinstance(base, ClassNode):
                pending.extend(b.node_id for b in base.bases if b.node_id is not None)
        return None

    def generate_required_links(self, node: Node) -> None:
        if not isinstance(node, ExampleNode):
            return
        if self.config.examples_url:
            self.generate_link_to_example(node, self.config.examples_url)
        elif not node.no_auto_list:
            self.generate_file_list(node, images=False)
            self.generate_file_list(node, images=True)

    def generate_link_to_example(self, node: ExampleNode, base_url: str) -> None:
        """Link to the example project at ``base_url``.

        The example path replaces a ``\\1`` placeholder in ``base_url``, or is
        appended to it after a ``/``.
        """
        host = urlsplit(base_url).hostname or ""
        label = f"Example project @ {host}" if host else "Example project"
        url = base_url
        if EXAMPLE_PATH_PLACEHOLDER not in url:
            if not url.endswith("/"):
                url += "/"
            url += EXAMPLE_PATH_PLACEHOLDER
        path = "/".join(
            part for part in (self.config.examples_install_path, node.name) if part
        )
        self.writer.start_element("para")
        self.writer.simple_link(url.replace(EXAMPLE_PATH_PLACEHOLDER, path), label)
        self.writer.end_element()  # para
        self.writer.new_line()

    def generate_file_list(self, node: ExampleNode, *, images: bool) -> None:
        """List the example's files or images, writing a listing page per file."""
        paths = sorted(node.images if images else node.files, key=str.lower)
        if not paths:
            return
        writer = self.writer
        self._para("Images:" if images else "Files:")
        writer.start_element("itemizedlist")
        writer.new_line()
        for path in paths:
            if images:
                if path:
                    self.generator.record_image(node, path)
                href = path
            else:
                href = self.generate_example_file_page(node, path)
            writer.start_element("listitem")
            writer.new_line()
            writer.start_element("para")
            writer.simple_link(href, path)
            writer.end_element()  # para
            writer.end_element()  # listitem
            writer.new_line()
        writer.end_element()  # itemizedlist
        writer.new_line()

    def generate_example_file_page(self, node: ExampleNode, path: str) -> str:
        """Write the listing page of example file ``path`` and return its file name."""
        file_name = example_file_name(path, node.physical_module or self.config.project)
        code = read_example_file(path, self.config.example_dirs)
        with self._nested_document():
            self.start_document(node, file_name)
            self.generate_header(node.full_title, path, node)
            if code is None:
                self.warn(node, f"Cannot find file to quote from: '{path}'")
                code = ""
            self.generator.interpreter.generate_text(listing_text(path, code), node)
            self.end_document()
        return file_name

    # Lists after the body

    def generate_also_list(self, node: Node) -> None:
        also = list(node.doc.also_list)
        self._supplement_also_list(node, also)
        if not also:
            return
        writer = self.writer
        writer.start_element("para")
        writer.text_element("emphasis", "See also ")
        writer.new_line()
        writer.start_element("simplelist", {"type": "vert", "role": "see-also"})
        for text in also:
            writer.start_element("member")
            self.generator.interpreter.generate_text(text, node)
            writer.end_element()  # member
            writer.new_line()
        writer.end_element()  # simplelist
        writer.new_line()
        writer.end_element()  # para
        writer.new_line()

    def _supplement_also_list(self, node: Node, also: list[Text]) -> None:
        """Prepend the matching setter or getter of an accessor function."""
        if not isinstance(node, FunctionNode) or node.is_macro or node.overload_number:
            return
        name = node.name
        if name.startswith("set") and len(name) >= 4:
            candidates = [
                name[3].lower() + name[4:],
                f"is{name[3:]}",
                f"has{name[3:]}",
            ]
        elif name:
            candidates = [f"set{name[0].upper()}{name[1:]}"]
        else:
            return
        for candidate in candidates:
            alternate = self._sibling_function(node, candidate)
            if alternate is None:
                continue
            if alternate.is_private:
                return
            if any(candidate in text.to_plain() for text in also):
                return
            label = f"{candidate}()"
            also.insert(
                0,
                Text.from_atoms(
                    (AtomKind.LINK, label),
                    (AtomKind.FORMATTING_LEFT, FORMATTING_LINK),
                    (AtomKind.STRING, label),
                    (AtomKind.FORMATTING_RIGHT, FORMATTING_LINK),
                ),
            )
            return

    def _sibling_function(self, node: Node, name: str) -> FunctionNode | None:
        parent = self.store.parent(node)
        if parent is None:
            return None
        for child in self.store.children(parent):
            if isinstance(child, FunctionNode) and child.name == name:
                return child
        return None

    def generate_maintainer_list(self, node: Node) -> None:
        maintainers = node.doc.meta("maintainer")
        if not maintainers:
            return
        writer = self.writer
        writer.start_element("para")
        writer.text_element("emphasis", "Maintained by: ")
        writer.new_line()
        writer.start_element("simplelist", {"type": "vert", "role": "maintainer"})
        for maintainer in maintainers:
            writer.text_element("member", maintainer)
            writer.new_line()
        writer.end_element()  # simplelist
        writer.new_line()
        writer.end_element()  # para
        writer.new_line()

    # Notes on functions

    def generate_overloaded_signal(self, node: Node) -> None:
        code = overloaded_signal_code(self.store, node)
        if not code:
            return
        writer = self.writer
        writer.start_element("note")
        writer.new_line()
        writer.start_element("para")
        writer.characters("Signal ")
        writer.text_element("emphasis", node.name)
        writer.characters(
            " is overloaded in this class. To connect to this signal by using the "
            "function pointer syntax, Qt provides a convenient helper for obtaining "
            "the function pointer as shown in this example:"
        )
        writer.text_element("code", code)
        writer.end_element()  # para
        writer.new_line()
        writer.end_element()  # note
        writer.new_line()

    def generate_private_signal_note(self) -> None:
        self.writer.start_element("note")
        self.writer.new_line()
        self._para(
            "This is a private signal. It can be used in signal connections but "
            "cannot be emitted by the user."
        )
        self.writer.end_element()  # note
        self.writer.new_line()

    def generate_invokable_note(self, node: Node | None) -> None:
        writer = self.writer
        _, href = self.generator.links.resolve("Q_INVOKABLE", node)
        writer.start_element("note")
        writer.new_line()
        writer.start_element("para")
        writer.characters(
            "This function can be invoked via the meta-object system and from QML. See "
        )
        self.generator.links.generate_simple_link(href, "Q_INVOKABLE")
        writer.characters(".")
        writer.end_element()  # para
        writer.new_line()
        writer.end_element()  # note
        writer.new_line()

    def generate_associated_property_notes(self, node: FunctionNode) -> None:
        """Say which properties ``node`` reads, writes, resets or notifies."""
        if not node.associated_property_ids:
            return
        properties = sorted(
            (self.store.get(i) for i in node.associated_property_ids),
            key=lambda prop: prop.name,
        )
        writer = self.writer
        writer.start_element("note")
        writer.new_line()
        writer.start_element("para")
        for prop in properties:
            role = prop.role(node.node_id) if isinstance(prop, PropertyNode) else ""
            writer.characters(f"{_ACCESSOR_ROLES.get(role, '')}for property ")
            self._link_to(prop, None, prop.name)
            writer.characters(". ")
        writer.end_element()  # para
        writer.new_line()
        writer.end_element()  # note
        writer.new_line()

    # Requisites

    def _generate_requisite_list(
        self, entries: list[tuple[str, cabc.Callable[[], None]]]
    ) -> None:
        if not entries:
            return
        writer = self.writer
        writer.start_element("variablelist")
        writer.new_line()
        for term, fill in entries:
            writer.start_element("varlistentry")
            writer.new_line()
            writer.text_element("term", term)
            writer.new_line()
            writer.start_element("listitem")
            writer.new_line()
            writer.start_element("para")
            fill()
            writer.end_element()  # para
            writer.new_line()
            writer.end_element()  # listitem
            writer.new_line()
            writer.end_element()  # varlistentry
            writer.new_line()
        writer.end_element()  # variablelist
        writer.new_line()

    def _characters(self, value: str) -> cabc.Callable[[], None]:
        return lambda: self.writer.characters(value)

    def generate_requisites(self, aggregate: Aggregate) -> None:
        """Write the header, version, build and inheritance facts of ``aggregate``."""
        entries: list[tuple[str, cabc.Callable[[], None]]] = [
            ("Header", self._characters(include)) for include in aggregate.include_files
        ]
        if aggregate.since:
            since = naming.format_since(aggregate.since, self.config.project)
            entries.append(("Since", self._characters(since)))
        if isinstance(aggregate, ClassNode | NamespaceNode) and aggregate.physical_module:
            module = self.store.collection(aggregate.physical_module, NodeKind.COLLECTION_MODULE)
            if module is not None and module.qt_variable:
                entries.append(("qmake", self._characters(f"QT += {module.qt_variable}")))
        if isinstance(aggregate, ClassNode):
            links = self.generator.links
            inherited_by = (
                "Inherited By",
                lambda: links.generate_sorted_names(aggregate, aggregate.derived),
            )
            instantiated = aggregate.qml_element_id is not None and not aggregate.is_internal
            if instantiated:
                if aggregate.derived:
                    entries.append(inherited_by)
                qml_element = self.store.get(aggregate.qml_element_id)
                entries.append(
                    (
                        "Instantiated By",
                        lambda: links.generate_simple_link(
                            self.store.full_document_location(qml_element), qml_element.name
                        ),
                    )
                )
            if any(base.node_id is not None for base in aggregate.bases):
                entries.append(("Inherits", lambda: links.generate_inherits(aggregate)))
            if aggregate.derived and not instantiated:
                entries.append(inherited_by)
        self._generate_requisite_list(entries)

    def generate_qml_requisites(self, node: QmlTypeNode) -> None:
        """Write the import statement and QML inheritance facts of ``node``."""
        synopsis = self.generator.synopsis
        links = self.generator.links
        version = synopsis.qml_module_version(node)
        import_statement = f"import {node.logical_module_name} {version}".rstrip()
        entries: list[tuple[str, cabc.Callable[[], None]]] = [
            ("Import Statement", self._characters(import_statement))
        ]
        if node.since:
            entries.append(
                ("Since:", self._characters(naming.format_since(node.since, self.config.project)))
            )
        subclasses = self.store.qml_subclasses(node)
        if subclasses:
            entries.append(
                ("Inherited By:", lambda: links.generate_sorted_qml_names(node, subclasses))
            )
        base = synopsis.documented_qml_base(node)
        if base is not None:
            entries.append(("Inherits:", lambda: self._link_to(base, node, base.name)))
        if node.class_node_id is not None:
            cls = self.store.get(node.class_node_id)
            if not cls.is_internal:
                entries.append(
                    (
                        "Instantiates:",
                        lambda: links.generate_simple_link(
                            self.store.full_document_location(cls), cls.name
                        ),
                    )
                )
        self._generate_requisite_list(entries)

    # Member details

    def generate_detailed_member(self, node: Node, relative: Node | None) -> None:
        """Write the titled section documenting one member of ``relative``."""
        writer = self.writer
        synopsis = self.generator.synopsis
        writer.start_element("section")
        if isinstance(node, SharedCommentNode):
            members = [self.store.get(i) for i in node.collective]
            for index, member in enumerate(members):
                if index == 0:
                    writer.set_attribute("xml:id", self._anchor(member))
                    writer.new_line()
                    writer.start_element("title")
                else:
                    writer.start_element(
                        "bridgehead", {"renderas": "sect2", "xml:id": self._anchor(member)}
                    )
                synopsis.generate_synopsis(member, relative, SectionStyle.DETAILS)
                writer.end_element()  # title or bridgehead
                writer.new_line()
            for member in members:
                synopsis.generate_docbook_synopsis(member)
        else:
            writer.set_attribute("xml:id", self._anchor(node))
            writer.new_line()
            writer.start_element("title")
            synopsis.generate_synopsis(node, relative, SectionStyle.DETAILS)
            writer.end_element()  # title
            writer.new_line()
            if isinstance(node, EnumNode):
                flags = self.store.flags_typedef(node)
                if flags is not None:
                    writer.start_element("bridgehead", {"renderas": "sect2"})
                    synopsis.generate_synopsis(flags, relative, SectionStyle.DETAILS)
                    writer.end_element()  # bridgehead
                    writer.new_line()
            synopsis.generate_docbook_synopsis(node)

        self.generate_status(node)
        self.generate_body(node)
        self.generate_overloaded_signal(node)
        self.generate_thread_safeness(node)
        self.generate_since(node)

        match node:
            case PropertyNode():
                self._generate_property_accessors(node)
            case FunctionNode():
                if node.is_private_signal:
                    self.generate_private_signal_note()
                if node.is_invokable:
                    self.generate_invokable_note(node)
                self.generate_associated_property_notes(node)
            case EnumNode():
                self._generate_flags_sentence(node)
        self.generate_also_list(node)
        writer.end_section()

    def _generate_property_accessors(self, node: PropertyNode) -> None:
        for heading, ids in (
            ("Access functions:", node.getter_ids + node.setter_ids + node.resetter_ids),
            ("Notifier signal:", node.notifier_ids),
        ):
            if not ids:
                continue
            section = Section(
                "", "", "", SectionStyle.ACCESSORS, members=[self.store.get(i) for i in ids]
            )
            self.writer.start_element("para")
            self.writer.text_element("emphasis", heading, {"role": "bold"})
            self.writer.end_element()  # para
            self.writer.new_line()
            self.generate_section_list(section, node)

    def _generate_flags_sentence(self, node: EnumNode) -> None:
        flags = self.store.flags_typedef(node)
        if flags is None:
            return
        qflags = self.store.find_class("QFlags")
        writer = self.writer
        writer.start_element("para")
        writer.characters(f"The {flags.name} type is a typedef for ")
        self._link_to(qflags, None, "QFlags")
        writer.characters(
            f"<{node.name}>. It stores an OR combination of {node.name} values."
        )
        writer.end_element()  # para
        writer.new_line()

    def generate_section_list(
        self, section: Section, relative: Node | None, *, obsolete: bool = False
    ) -> None:
        """Write the visible members of ``section`` as an itemized list of synopses."""
        writer = self.writer
        members = section.obsolete_members if obsolete else section.members
        visible = [member for member in members if not member.is_private]
        if visible:
            has_private_signals = False
            is_invokable = False
            writer.start_element("itemizedlist")
            writer.new_line()
            for member in visible:
                writer.start_element("listitem")
                writer.new_line()
                writer.start_element("para")
                self.generator.synopsis.generate_synopsis(member, relative, section.style)
                if isinstance(member, FunctionNode):
                    if member.is_private_signal:
                        has_private_signals = True
                    elif member.is_invokable:
                        is_invokable = True
                writer.end_element()  # para
                writer.new_line()
                writer.end_element()  # listitem
                writer.new_line()
            writer.end_element()  # itemizedlist
            writer.new_line()
            if has_private_signals:
                self.generate_private_signal_note()
            if is_invokable:
                self.generate_invokable_note(relative)
        if not obsolete and section.style is SectionStyle.SUMMARY and section.inherited_members:
            writer.start_element("itemizedlist")
            writer.new_line()
            self._generate_section_inherited_list(section, relative)
            writer.end_element()  # itemizedlist
            writer.new_line()

    def _generate_section_inherited_list(self, section: Section, relative: Node | None) -> None:
        writer = self.writer
        for aggregate, count in section.inherited_members:
            noun = section.singular if count == 1 else section.plural
            href = (
                f"{self.store.file_name(aggregate)}#"
                f"{naming.clean_ref(section.title.lower())}"
            )
            writer.start_element("listitem")
            writer.start_element("para")
            writer.characters(f"{count} {noun} inherited from ")
            self.generator.links.generate_simple_link(
                href, self.store.plain_full_name(aggregate, relative)
            )
            writer.end_element()  # para
            writer.end_element()  # listitem
            writer.new_line()

    def qml_property_title(self, node: QmlPropertyNode) -> str:
        """Return the heading of a QML property, such as ``[read-only] width : real``."""
        title = ""
        if not node.is_writable:
            title += "[read-only] "
        if node.is_default:
            title += "[default] "
        if node.is_attached:
            parent = self.store.parent(node)
            if parent is not None:
                title += f"{parent.name}."
        return f"{title}{node.name} : {node.data_type}"

    def generate_detailed_qml_member(self, node: Node, relative: Node | None) -> None:
        """Write the section documenting one QML property, signal or method."""
        writer = self.writer
        synopsis = self.generator.synopsis
        opened = True
        match node:
            case SharedCommentNode() if node.is_property_group:
                heading = f"{node.name} group" if node.name else node.name
                writer.start_section(self._anchor(node), heading)
                for member in (self.store.get(i) for i in node.collective):
                    if not isinstance(member, QmlPropertyNode):
                        continue
                    writer.text_element(
                        "bridgehead",
                        self.qml_property_title(member),
                        {"renderas": "sect2", "xml:id": self._anchor(member)},
                    )
                    writer.new_line()
                    synopsis.generate_docbook_synopsis(member)
            case QmlPropertyNode():
                writer.start_section(self._anchor(node), self.qml_property_title(node))
                synopsis.generate_docbook_synopsis(node)
            case SharedCommentNode():
                members = [
                    member
                    for member in (self.store.get(i) for i in node.collective)
                    if isinstance(member, QmlPropertyNode)
                    or (isinstance(member, FunctionNode) and member.is_qml)
                ]
                opened = bool(members)
                for index, member in enumerate(members):
                    if index == 0:
                        writer.start_element("section", {"xml:id": self._anchor(member)})
                        writer.new_line()
                        writer.start_element("title")
                    else:
                        writer.start_element(
                            "bridgehead",
                            {"renderas": "sect2", "xml:id": self._anchor(member)},
                        )
                    if isinstance(member, QmlPropertyNode):
                        writer.characters(self.qml_property_title(member))
                    else:
                        synopsis.generate_synopsis(member, relative, SectionStyle.DETAILS)
                    writer.end_element()  # title or bridgehead
                    writer.new_line()
                    synopsis.generate_docbook_synopsis(member)
            case _:
                writer.start_section_begin(self._anchor(node))
                synopsis.generate_synopsis(node, relative, SectionStyle.DETAILS)
                writer.start_section_end()

        self.generate_status(node)
        self.generate_body(node)
        self.generate_thread_safeness(node)
        self.generate_since(node)
        self.generate_also_list(node)
        if opened:
            writer.end_section()

    def generate_qml_text(self, text: Text, relative: Node | None) -> bool:
        """Interpret only the QML-specific regions of ``text``."""
        atom = text.first_atom
        if atom is None:
            return False
        interpreter = self.generator.interpreter
        self.state.reset_text_flags()
        while atom is not None:
            if atom.kind is not AtomKind.QML_TEXT:
                atom = atom.next
                continue
            atom = atom.next
            while atom is not None and atom.kind is not AtomKind.END_QML_TEXT:
                for _ in range(1 + interpreter.generate_atom(atom, relative)):
                    if atom is None:
                        break
                    atom = atom.next
        return True

    # Obsolete members

    def generate_obsolete_members(self, sections: Sections) -> None:
        """Collect the obsolete members of a C++ aggregate into a trailing section."""
        self._generate_obsolete(sections, "class", self.generate_detailed_member)

    def generate_obsolete_qml_members(self, sections: Sections) -> None:
        self._generate_obsolete(sections, "QML type", self.generate_detailed_qml_member)

    def _generate_obsolete(
        self,
        sections: Sections,
        noun: str,
        generate_member: cabc.Callable[[Node, Node | None], None],
    ) -> None:
        obsolete_sections = sections.obsolete_sections()
        if not obsolete_sections:
            return
        aggregate = sections.aggregate
        writer = self.writer
        self._start_section("obsolete", f"Obsolete Members for {aggregate.name}")
        writer.start_element("para")
        writer.start_element("emphasis", {"role": "bold"})
        writer.characters(f"The following members of {noun} ")
        self._link_to(aggregate, None, aggregate.name)
        writer.characters(" are obsolete.")
        writer.end_element()  # emphasis
        writer.characters(_OBSOLETE_ADVICE)
        writer.end_element()  # para
        writer.new_line()
        for section in obsolete_sections:
            self._start_section(f"obsolete {section.title.lower()}", section.title)
            for member in section.obsolete_members:
                if not member.is_private:
                    generate_member(member, aggregate)
            writer.end_section()
        writer.end_section()

    # Page kinds

    def _details_section(self, node: Node, *, maintainers: bool = False) -> None:
        self._start_section("details", "Detailed Description")
        self.generate_body(node)
        self.generate_also_list(node)
        if maintainers:
            self.generate_maintainer_list(node)
        self.writer.end_section()

    def _generate_member_sections(self, sections: Sections, aggregate: Aggregate) -> None:
        writer = self.writer
        for section in sections.details:
            visible = [member for member in section.members if not member.is_private]
            if not visible:
                continue
            self._start_section(section.title.lower(), section.title)
            for member in visible:
                if isinstance(member, ClassNode):
                    writer.start_section_begin()
                    writer.characters("class ")
                    self.generator.links.generate_full_name(member, aggregate)
                    writer.start_section_end()
                    self.generate_brief(member)
                    writer.end_section()
                else:
                    self.generate_detailed_member(member, aggregate)
            writer.end_section()

    def generate_cpp_reference_page(self, aggregate: Aggregate) -> None:
        """Write the reference page of a class, namespace or header."""
        store = self.store
        match aggregate:
            case NamespaceNode():
                title = f"{aggregate.plain_name} Namespace"
            case ClassNode():
                title = f"{aggregate.plain_name} Class"
            case _:
                title = aggregate.full_title
        full_name = store.plain_full_name(aggregate)
        subtitle = full_name if full_name != aggregate.plain_name else ""

        self.start_document(aggregate)
        self.generate_header(title, subtitle, aggregate)
        self.generate_requisites(aggregate)
        self.generate_status(aggregate)
        self.generator.synopsis.generate_docbook_synopsis(aggregate)
        if not aggregate.doc.is_empty:
            self._details_section(aggregate, maintainers=True)
        sections = Sections(store, aggregate, show_internal=self.config.show_internal)
        self._generate_member_sections(sections, aggregate)
        self.generate_obsolete_members(sections)
        self.end_document()

    def generate_qml_type_page(self, node: QmlTypeNode) -> None:
        self.start_document(node)
        self.generate_header(f"{node.full_title} QML Type", node.subtitle, node)
        self.generate_qml_requisites(node)
        self._start_section("details", "Detailed Description")
        self.generate_body(node)
        if node.class_node_id is not None:
            cls = self.store.get(node.class_node_id)
            self.generate_qml_text(cls.doc.body, cls)
        self.generate_also_list(node)
        self.writer.end_section()
        sections = Sections(self.store, node, show_internal=self.config.show_internal)
        self._generate_qml_member_sections(sections, node)
        self.generate_obsolete_qml_members(sections)
        self.end_document()

    def generate_qml_basic_type_page(self, node: QmlBasicTypeNode) -> None:
        self.start_document(node)
        self.generate_header(f"{node.full_title} QML Basic Type", node.subtitle, node)
        self._details_section(node)
        sections = Sections(self.store, node, show_internal=self.config.show_internal)
        self._generate_qml_member_sections(sections, node)
        self.end_document()

    def _generate_qml_member_sections(self, sections: Sections, node: Aggregate) -> None:
        for section in sections.details:
            if not section.members:
                continue
            self._start_section(section.title.lower(), section.title)
            for member in section.members:
                self.generate_detailed_qml_member(member, node)
            self.writer.end_section()

    def generate_page_node(self, node: PageNode) -> None:
        """Write a text page: header, body and "See also" list."""
        self.start_document(node)
        self.generate_header(node.full_title, node.subtitle, node)
        self.generate_body(node)
        self.generate_also_list(node)
        self.end_document()

    def generate_collection_page(self, node: CollectionNode) -> None:
        """Write the page of a group, C++ module or QML module."""
        store = self.store
        lists = self.generator.lists
        self.start_document(node)
        self.generate_header(node.full_title, node.subtitle, node)
        self.generator.synopsis.generate_docbook_synopsis(node)
        if node.is_module:
            self.generate_brief(node)
            self.generate_status(node)
            self.generate_since(node)
            members = [member for member in store.members(node) if not member.is_internal]
            for ref, title, kind in (
                ("namespaces", "Namespaces", NamespaceNode),
                ("classes", "Classes", ClassNode),
            ):
                found = sorted(
                    (member for member in members if isinstance(member, kind)),
                    key=lambda member: store.plain_full_name(member).lower(),
                )
                if found:
                    self._start_section(ref, title)
                    lists.generate_annotated_list(node, found, ref)
                    self.writer.end_section()

        titled = node.is_module and not node.doc.brief.is_empty
        if titled:
            self._start_section("details", "Detailed Description")
        else:
            self.writer.write_anchor(self.state.refs.register("details"))
        self.generate_body(node)
        self.generate_also_list(node)
        if not node.no_auto_list and (node.is_group or node.is_qml_module):
            lists.generate_annotated_list(node, store.members(node), "members")
        if titled:
            self.writer.end_section()
        self.end_document()

    def generic_collection_file_name(self, node: CollectionNode) -> str:
        module = node.physical_module or self.config.project
        return f"{naming.canonical_title(f'{module}-{node.name}')}.xml"

    def generate_generic_collection_page(self, node: CollectionNode) -> None:
        """Write a page of members related to entities documented in other modules."""
        self.start_document(node, self.generic_collection_file_name(node))
        self.generate_header(node.full_title, node.subtitle, node)
        self._para(_GENERIC_COLLECTION_INTRO)
        for member in self.store.members(node):
            self.generate_detailed_member(member, node)
        self.end_document()

    def generate_proxy_page(self, node: ProxyNode) -> None:
        self.start_document(node)
        self.generate_header(self.store.plain_full_name(node), "", node)
        if not node.doc.is_empty:
            self._details_section(node, maintainers=True)
        sections = Sections(self.store, node, show_internal=self.config.show_internal)
        self._generate_member_sections(sections, node)
        self.end_document()

    # Tree walk

    def generate_documentation(self, node: Node) -> None:
        """Write the documents of ``node`` and, recursively, of its children."""
        if node.url or node.is_index_node or node.kind is NodeKind.EXTERNAL_PAGE:
            return
        if node.is_internal and not self.config.show_internal:
            return
        if node.parent_id is not None:
            self.generate_node_page(node)
        if isinstance(node, Aggregate) and not node.is_private:
            for child in self.store.children(node):
                self.generate_documentation(child)

    def generate_node_page(self, node: Node) -> None:
        """Write the single document of ``node``, if its kind has one."""
        match node:
            case CollectionNode() if node.was_seen:
                self.generate_collection_page(node)
            case CollectionNode() if node.is_generic:
                self.generate_generic_collection_page(node)
            case CollectionNode():
                logger.debug("skipping unseen collection %s", node.name)
            case PageNode():
                self.generate_page_node(node)
            case ClassNode() | NamespaceNode() | HeaderNode():
                if self.store.doc_must_be_generated(node):
                    self.generate_cpp_reference_page(node)
            case QmlTypeNode():
                self.generate_qml_type_page(node)
            case QmlBasicTypeNode():
                self.generate_qml_basic_type_page(node)
            case ProxyNode():
                self.generate_proxy_page(node)
            case _:
                pass


__all__ = ["EXAMPLE_PATH_PLACEHOLDER", "PageComposer", "overloaded_signal_code"]
