from collections.abc import Sequence
from typing import Any

from ..core.errors import InvalidNoteTypeError, NoteTypeNotFoundError, NoteTypeSyntaxError
from ..core.model import RESERVED_FIELDS, Field, Line, NoteType, Template
from ..core.nodes import TableBlock
from ..core.ports import Tokenizer
from .settings import is_number, read_settings, read_table
from .walker import to_code_block, walk_packs

NOTE_TYPE_FILE = "noteType.json"
NOTE_TYPE_TABLE = "noteType"
CSS_FILE = "css"
LATEX_PRE_FILE = "pre.tex"
LATEX_POST_FILE = "post.tex"
QUESTION_EXT = ".question.html"
ANSWER_EXT = ".answer.html"


def parse_note_type(lines: Sequence[Line], tokenizer: Tokenizer) -> NoteType:
    """
    Read the note type defined on a page.

    Code blocks are sorted by name into channels:
    - ``noteType.json``: the settings (a ``table:noteType`` may add more)
    - ``css``: card styling
    - ``pre.tex`` / ``post.tex``: LaTeX preamble and postamble, used together
    - ``<name>.question.html`` / ``<name>.answer.html``: one template per name

    Raises:
        NoteTypeNotFoundError: the page is empty or defines no note type
        NoteTypeSyntaxError: the JSON does not parse
        InvalidNoteTypeError: a member is missing or has the wrong type
    """
    if not lines:
        raise NoteTypeNotFoundError("This is an empty page so no note type is found.")

    json_text = ""
    table: dict[str, Any] = {}
    css = ""
    latex_pre = ""
    latex_post = ""
    templates: dict[str, list[str]] = {}  # name -> [question, answer]
    updated = 0
    for pack, span in walk_packs(lines, tokenizer):
        if pack.kind == "table":
            table_block = tokenizer.to_block(pack)
            if isinstance(table_block, TableBlock) and table_block.file_name == NOTE_TYPE_TABLE:
                read_table(table_block, table)
                updated = max([updated, *(line.updated for line in span)])
            continue
        if pack.kind != "codeBlock":
            continue

        updated = max([updated, *(line.updated for line in span)])
        block = to_code_block(pack, tokenizer)
        fragment = f"\n{block.content}"
        name = block.file_name
        if name == NOTE_TYPE_FILE:
            json_text += fragment
        elif name == CSS_FILE:
            css += fragment
        elif name == LATEX_PRE_FILE:
            latex_pre += fragment
        elif name == LATEX_POST_FILE:
            latex_post += fragment
        elif name.endswith(QUESTION_EXT):
            templates.setdefault(name[: -len(QUESTION_EXT)], ["", ""])[0] += fragment
        elif name.endswith(ANSWER_EXT):
            templates.setdefault(name[: -len(ANSWER_EXT)], ["", ""])[1] += fragment

    settings = read_settings(
        json_text,
        table,
        "note type",
        NoteTypeNotFoundError,
        NoteTypeSyntaxError,
        InvalidNoteTypeError,
    )

    if "name" not in settings:
        raise InvalidNoteTypeError("Note type name is not found.", field="name")
    if not isinstance(settings["name"], str):
        raise InvalidNoteTypeError("Note type name must be string.", field="name")
    if not settings["name"].strip():
        raise InvalidNoteTypeError("Note type name must not be empty.", field="name")
    if "id" not in settings:
        raise InvalidNoteTypeError("Note type id not found.", field="id")
    if not is_number(settings["id"]):
        raise InvalidNoteTypeError("Note type id must be number.", field="id")
    if "fields" not in settings:
        raise InvalidNoteTypeError("Note type must have fields.", field="fields")
    if not isinstance(settings["fields"], list):
        raise InvalidNoteTypeError("`fields` must be an array.", field="fields")

    fields = [_parse_field(item) for item in settings["fields"]]
    reserved = {f.name for f in RESERVED_FIELDS}
    fields = [f for f in fields if f.name not in reserved] + list(RESERVED_FIELDS)

    if not templates:
        raise InvalidNoteTypeError(
            "Note type must have one or more template.", field="templates"
        )
    parsed_templates = []
    for name, (question, answer) in templates.items():
        if question.strip() == "":
            raise InvalidNoteTypeError(
                f'"{name}{QUESTION_EXT}" is empty.', field=f"{name}{QUESTION_EXT}"
            )
        if answer.strip() == "":
            raise InvalidNoteTypeError(
                f'"{name}{ANSWER_EXT}" is empty.', field=f"{name}{ANSWER_EXT}"
            )
        parsed_templates.append(Template(name=name, question=question, answer=answer))

    is_cloze = settings.get("isCloze")
    if "isCloze" in settings and not isinstance(is_cloze, bool):
        raise InvalidNoteTypeError("`isCloze` must be boolean.", field="isCloze")

    return NoteType(
        id=settings["id"],
        name=settings["name"],
        updated=updated,
        fields=tuple(fields),
        templates=tuple(parsed_templates),
        css=css if css.strip() else None,
        latex=(latex_pre, latex_post) if latex_pre.strip() and latex_post.strip() else None,
        is_cloze=is_cloze,
    )


def _parse_field(item: Any) -> Field:
    if isinstance(item, str):
        return Field(name=item)
    if not isinstance(item, dict):
        raise InvalidNoteTypeError(
            "Members of `fields` must be a string or an object.", field="fields"
        )
    if "name" not in item:
        raise InvalidNoteTypeError("Each field object must have `name`.", field="name")
    if not isinstance(item["name"], str):
        raise InvalidNoteTypeError("The name of a field must be a string.", field="name")

    if "description" in item and not isinstance(item["description"], str):
        raise InvalidNoteTypeError(
            "The description of a field must be a string.", field="description"
        )
    if "rtl" in item and not isinstance(item["rtl"], bool):
        raise InvalidNoteTypeError("The rtl of a field must be a boolean.", field="rtl")
    if "font" in item and not isinstance(item["font"], str):
        raise InvalidNoteTypeError("The font of a field must be a string.", field="font")
    if "fontSize" in item and not is_number(item["fontSize"]):
        raise InvalidNoteTypeError(
            "The fontSize of a field must be a number.", field="fontSize"
        )

    return Field(
        name=item["name"],
        description=item.get("description"),
        rtl=item.get("rtl"),
        font=item.get("font"),
        font_size=item.get("fontSize"),
    )
