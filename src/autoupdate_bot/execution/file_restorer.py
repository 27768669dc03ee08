"""Writes original dependency file snapshots back to the working tree."""

from pathlib import Path

from autoupdate_bot.execution.exceptions import FileRestoreError
from autoupdate_bot.models.dependency_models import DependencyFile


class FileRestorer:
    """Restores dependency files captured before an update set was applied."""

    def __init__(self, repo_path: str | Path = ".") -> None:
        self.repo_path = Path(repo_path)

    def restore(self, files: list[DependencyFile]) -> None:
        """Write each snapshot back, stopping at the first failure.

        Existing files keep their permission bits since they are rewritten in
        place rather than replaced.

        Raises:
            FileRestoreError: On the first file that cannot be written.
        """
        print(f"{len(files)} file(s) to be restored.")
        for dependency_file in files:
            print(f"Restoring file {dependency_file.path}: ", end="")
            target = self.repo_path / dependency_file.path
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(dependency_file.content)
            except OSError as exc:
                print("failed")
                raise FileRestoreError(dependency_file.path, str(exc)) from exc
            print("done")
