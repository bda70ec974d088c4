"""Encode and decode project path ↔ transcript directory name.

The external writer stores each project's transcripts in a directory whose
name is the project's absolute path with every separator replaced by ``-``.
The mapping is only reversible for paths whose segment names contain no
``-`` themselves: ``/home/wiz/my-app`` and ``/home/wiz/my/app`` both encode
to ``-home-wiz-my-app`` and decode to the latter. Callers that need the
exact directory should keep the encoded token (``Project.id``) rather than
re-encoding a decoded path.
"""

RESERVED = "-"
SEPARATOR = "/"


def encode_path(path: str, fold_dots: bool = False) -> str:
    """Encode a filesystem path to a project directory name.

    /home/wiz/AI/LLM → -home-wiz-AI-LLM

    With ``fold_dots`` the ``.`` characters are folded too, which is how the
    CLI names directories for paths like ``/src/github.com/org/repo``.
    """
    if not path:
        return ""
    encoded = path.replace(SEPARATOR, RESERVED)
    # Windows-origin paths
    encoded = encoded.replace("\\", RESERVED)
    if fold_dots:
        encoded = encoded.replace(".", RESERVED)
    return encoded


def decode_path(encoded: str) -> str:
    """Decode a project directory name to an absolute filesystem path.

    -home-wiz-AI-LLM → /home/wiz/AI/LLM
    home-wiz → /home/wiz
    """
    if not encoded:
        return ""
    if not encoded.startswith(RESERVED):
        encoded = SEPARATOR + encoded
    return encoded.replace(RESERVED, SEPARATOR)


def is_lossless(path: str) -> bool:
    """True when ``decode_path(encode_path(path)) == path`` is guaranteed.

    False for relative paths and for any path with a ``-`` inside a segment.
    """
    if not path or not path.startswith(SEPARATOR):
        return False
    return RESERVED not in path and "\\" not in path


def extract_project_name(project_id: str) -> str:
    """Get the last path segment as the project display name.

    -home-wiz-AI-LLM → LLM
    """
    path = decode_path(project_id)
    return path.rstrip(SEPARATOR).rsplit(SEPARATOR, 1)[-1] if path else ""
