"""GitHub repository URL extraction from task descriptions."""

import re
from typing import Optional

# Owner allows word characters and hyphens, the repository name also allows dots.
GITHUB_REPO_PATTERN = re.compile(
    r"https://github\.com/[\w\-]+/[\w\-.]+",
    re.IGNORECASE | re.ASCII,
)


def extract_repo_url(description: Optional[str]) -> Optional[str]:
    """
    Find the first GitHub repository URL embedded in free text.

    The repository is not checked for existence or reachability.

    Args:
        description: Task description text

    Returns:
        The first matching URL exactly as written, or None when there is none
    """
    if not description:
        return None

    match = GITHUB_REPO_PATTERN.search(description)
    return match.group(0) if match else None
