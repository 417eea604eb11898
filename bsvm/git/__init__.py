"""Git operations on the local clone.

Usage:
    from bsvm.git import Repository

    repo = Repository(config.git_dir)
    tags = repo.list_tags().unwrap_or([])
"""

from bsvm.git.repository import GitError, Repository, TagObject, parse_tag_object

__all__ = [
    "GitError",
    "Repository",
    "TagObject",
    "parse_tag_object",
]
