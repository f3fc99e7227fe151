import re
from typing import Dict, List, Optional, Sequence, Tuple

import structlog
from diff_match_patch import diff_match_patch

from codedoc.requests import Request, delete, get_range, insert
from codedoc.utils.utf16 import text_width16

logger = structlog.get_logger(__name__)

# whitespace runs, identifiers/numbers, single punctuation marks
_TOKEN_RE = re.compile(r"\s+|\w+|[^\w\s]")


def generate_edits_from_text(
    original_text: str, modified_text: str, start_index: int, segment_id: Optional[str] = None
) -> List[Request]:
    """
    Compares original and modified text and returns the delete/insert requests
    that turn one into the other, positioned from `start_index` in utf16 units.
    Diffs token by token so formatter changes produce few, readable edits.

    Requests are sequential: each one is positioned as if all previous ones
    have already been applied.
    """
    dmp = diff_match_patch()

    (encoded_original, encoded_modified), vocabulary = _encode_tokens(original_text, modified_text)
    diffs = dmp.diff_main(encoded_original, encoded_modified, False)
    dmp.diff_cleanupSemantic(diffs)
    dmp.diff_charsToLines(diffs, vocabulary)

    reqs: List[Request] = []
    index = start_index

    for op, text in diffs:
        size = text_width16(text)
        if op == dmp.DIFF_EQUAL:
            index += size
        elif op == dmp.DIFF_DELETE:
            # deleted text vanishes, so the cursor stays put
            reqs.append(delete(get_range(index, index + size, segment_id)))
        elif op == dmp.DIFF_INSERT:
            reqs.append(insert(text, index, segment_id))
            index += size

    logger.debug("Generated edits from diff", edits=len(reqs))
    return reqs


def _encode_tokens(*texts: str) -> Tuple[Sequence[str], List[str]]:
    """
    Maps every distinct token to a single character so that diff_match_patch
    diffs token sequences. Returns the encoded texts and the token vocabulary,
    indexed by character code.
    """
    vocabulary: List[str] = []
    codes: Dict[str, str] = {}
    encoded = []
    for text in texts:
        chars = []
        for token in _TOKEN_RE.findall(text):
            if token not in codes:
                codes[token] = chr(len(vocabulary))
                vocabulary.append(token)
            chars.append(codes[token])
        encoded.append("".join(chars))
    return encoded, vocabulary
