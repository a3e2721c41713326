from enum import Enum
from fnmatch import fnmatchcase
import os
from functools import lru_cache


class LogType(Enum):
    Default = "default"
    Extract = "extract"
    Decode = "decode"


@lru_cache(typed=True)
def silenced_kinds(raw):
    """map each LogType to whether SILENCELOG (raw, undecoded) silences it.

    SILENCELOG is a comma-separated list of LogType globs, "!glob" keeps a
    kind active; "1", "true" or "" silence everything, "0" or "false" nothing.
    """
    if raw is None:
        return {kind: False for kind in LogType}
    patterns = [pattern.strip() for pattern in
                os.environ.decodevalue(raw).lower().split(",")]
    if len(patterns) > 1 and patterns[-1] == "":
        patterns.pop() # trailing comma

    if patterns in (["0"], ["false"]):
        return {kind: False for kind in LogType}
    if patterns in (["1"], ["true"], [""]):
        return {kind: True for kind in LogType}

    retval = {kind: False for kind in LogType}
    for pattern in patterns:
        silenced = not pattern.startswith("!")
        pattern = pattern.lstrip("!")
        kinds = [kind for kind in LogType if fnmatchcase(kind.value, pattern)]
        assert kinds, (f"SILENCELOG: {pattern!r} did not match any LogType: "
                       f"{' '.join(kind.value for kind in LogType)}")
        for kind in kinds:
            retval[kind] = silenced
    return retval


ENCODED_SILENCELOG = os.environ.encodekey("SILENCELOG")


def log(*args, kind=LogType.Default, **kwargs):
    """verbose printing, can be disabled by setting env var "SILENCELOG".
    """
    # os.environ._data is a plain dict: a lookup never raises
    env_var = os.environ._data.get(ENCODED_SILENCELOG, None)
    if silenced_kinds(env_var)[kind]:
        return
    print(*args, **kwargs)
