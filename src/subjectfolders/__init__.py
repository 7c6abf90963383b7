"""SubjectFolders: provision, verify and archive a shared subject-folder hierarchy."""

from subjectfolders.domain.constants import APP_VERSION as __version__

__all__ = ["__version__"]
