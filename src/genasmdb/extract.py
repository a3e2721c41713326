"""Extraction of the JSON literal embedded in the asmjit/asmdb data files.

The asmdb JavaScript sources wrap their data like this::

    $scope[$as] =
    // ${JSON:BEGIN}
    { ... }
    // ${JSON:END}
    ;

so the literal can be isolated without a JavaScript parser.
"""

from genasmdb.exceptions import (
    EmptyPayload,
    MarkerNotFound,
)
from genasmdb.util import log, LogType


# magic comment marking the beginning of the JSON data
JSON_BEGIN = "// ${JSON:BEGIN}"

# magic comment marking the end of the JSON data
JSON_END = "// ${JSON:END}"


def marker(value):
    if isinstance(value, str):
        value = value.encode("UTF-8")
    if not isinstance(value, bytes) or not value:
        raise ValueError(value)
    return value


def extract(content, begin=JSON_BEGIN, end=JSON_END):
    """return the bytes of content found strictly between the begin and end
    magic comments, without the newline following begin and the newline
    preceding end.
    """
    begin = marker(begin)
    end = marker(end)

    parts = content.split(begin, 1)
    if len(parts) <= 1:
        raise MarkerNotFound(begin)

    data = parts[1]
    if len(data) == 0:
        raise EmptyPayload("nothing follows %r" % begin.decode("UTF-8"))
    data = data[1:] # trim first newline
    if len(data) == 0:
        raise EmptyPayload("nothing follows %r" % begin.decode("UTF-8"))

    idx = data.find(end)
    if idx <= 0:
        raise MarkerNotFound(end)
    data = data[:idx-1] # also trim end of newline
    if len(data) == 0:
        raise EmptyPayload()

    log("extract", len(data), "bytes", kind=LogType.Extract)
    return data
