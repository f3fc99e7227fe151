from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import structlog

from codedoc.models import Document, ParagraphElement
from codedoc.parser.directives import apply_directive
from codedoc.parser.instance import CodeInstance, InstanceDefaults
from codedoc.parser.words import split_fields, strip_space

logger = structlog.get_logger(__name__)

CODE_INSTANCE_START = "<code>"  # required tag to denote start of code instance
CODE_INSTANCE_END = "</code>"  # required tag to denote end of code instance
CONFIG_START = "<conf>"  # required tag to denote start of config
CONFIG_END = "</conf>"  # required tag to denote end of config


class _Stage(Enum):
    HEADER = "header"
    BODY = "body"


@dataclass
class _OpenInstance:
    instance: CodeInstance
    stage: _Stage = _Stage.HEADER
    found_config_start: bool = False
    body: List[str] = field(default_factory=list)


def _is_tag(s: str, tag: str) -> bool:
    return s.casefold() == tag


def _scan_header(cur: Optional[_OpenInstance], par: ParagraphElement, defaults) -> Optional[_OpenInstance]:
    """Feeds the words of one italic run to the header state machine."""
    for s in split_fields(par.content):
        # have not found start of instance yet so check for start symbol
        if cur is None:
            if _is_tag(s, CODE_INSTANCE_START):
                cur = _OpenInstance(CodeInstance())
            continue

        if not cur.found_config_start:
            if _is_tag(s, CONFIG_START):
                cur.found_config_start = True
            continue

        if _is_tag(s, CONFIG_END):
            cur.instance.start_index = par.end_index
            cur.instance.end_index = par.end_index
            cur.instance.set_defaults(defaults)
            cur.stage = _Stage.BODY
            break

        apply_directive(cur.instance, s, par)
    return cur


def get_code_instances(doc: Document, defaults: Optional[InstanceDefaults] = None) -> List[CodeInstance]:
    """
    Gets the instances of code in a document. Each instance is surrounded with
    <code> and </code> tags and starts with a header of directives between
    <conf> and </conf>. All tags must be italic to keep them apart from the
    code body.
    """
    instances: List[CodeInstance] = []
    cur: Optional[_OpenInstance] = None

    for par in doc.iter_text_elements():
        if cur is None or cur.stage is _Stage.HEADER:
            if par.italic:
                cur = _scan_header(cur, par, defaults)
            continue

        # check for footer/end symbol
        if par.italic and _is_tag(strip_space(par.content), CODE_INSTANCE_END):
            instance = cur.instance
            instance.code = "".join(cur.body)
            cur = None
            if not instance.code:
                logger.warning("Skipping code instance with an empty body", start_index=instance.start_index)
                continue
            instances.append(instance)
            continue

        # write untrimmed body content, update end index
        cur.body.append(par.content)
        cur.instance.end_index = par.end_index

    if cur is not None:
        logger.warning("Discarding unterminated code instance", stage=cur.stage.value)

    logger.info("Found code instances", count=len(instances))
    return instances
