"""Diff rendering for LLM prompts.

Diffs are cut to a few files and a few lines per patch to keep the
prompt within a token budget.
"""

from dataclasses import dataclass
from typing import Optional

from standupnote.models import CommitDiff, FileChange


@dataclass
class DiffFormatOptions:
    """Limits applied when rendering a diff.

    Attributes:
        max_files: Files rendered before the "more files" note.
        max_patch_lines: Patch lines kept per file.
        indent: Prefix of every rendered line.
    """

    max_files: int = 5
    max_patch_lines: int = 30
    indent: str = "  "


def format_file_change(file: FileChange, options: Optional[DiffFormatOptions] = None) -> str:
    """Render one file of a diff.

    Args:
        file: The file change.
        options: Rendering limits.

    Returns:
        Header line, followed by the (possibly truncated) patch in a fenced
        block when the file has a patch.
    """
    options = options or DiffFormatOptions()
    indent = options.indent

    text = f"\n{indent}File: {file.filename} ({file.status}, +{file.additions}/-{file.deletions})\n"
    if not file.patch:
        return text

    patch_lines = file.patch.split("\n")
    text += f"{indent}```\n"
    text += "\n".join(f"{indent}{line}" for line in patch_lines[:options.max_patch_lines])
    if len(patch_lines) > options.max_patch_lines:
        text += f"\n{indent}... (truncated)"
    text += f"\n{indent}```\n"
    return text


def format_diff_for_prompt(diff: Optional[CommitDiff], options: Optional[DiffFormatOptions] = None) -> str:
    """Render a bounded text version of a commit diff.

    Args:
        diff: The diff to render. None or empty renders as "".
        options: Rendering limits.

    Returns:
        The rendered diff.

    Example output:
          File: app/api.py (modified, +12/-3)
          ```
          @@ -1,3 +1,4 @@
          ...
          ```

          ... and 7 more files
    """
    if diff is None or not diff.files:
        return ""

    options = options or DiffFormatOptions()
    files = diff.files[:options.max_files]
    text = "".join(format_file_change(f, options) for f in files)

    remaining = len(diff.files) - len(files)
    if remaining > 0:
        text += f"\n{options.indent}... and {remaining} more files\n"

    return text
