"""Build artifact verification run once before the server accepts traffic."""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .errors import BuildError, EntryDocumentMissingError, OutputDirectoryError

logger = logging.getLogger(__name__)

BuildInvoker = Callable[[str], None]


@dataclass(frozen=True)
class BuildArtifactState:
    output_directory_exists: bool
    entry_document_exists: bool


def inspect_build_artifacts(output_dir: Path, entry_document: str) -> BuildArtifactState:
    return BuildArtifactState(
        output_directory_exists=output_dir.is_dir(),
        entry_document_exists=(output_dir / entry_document).is_file(),
    )


def run_build(command: str) -> None:
    """Run the frontend build synchronously with NODE_ENV forced to production.

    Standard I/O is inherited so build output lands in the server's console.
    No timeout is applied: a hanging build blocks startup.
    """
    env = {**os.environ, "NODE_ENV": "production"}
    try:
        subprocess.run(shlex.split(command), env=env, check=True)
    except subprocess.CalledProcessError as error:
        raise BuildError(f"Build failed: `{command}` exited with status {error.returncode}") from error
    except OSError as error:
        raise BuildError(f"Build failed: {error}") from error


def verify_build_artifacts(
    output_dir: Path,
    entry_document: str,
    build_command: str,
    build: BuildInvoker = run_build,
) -> BuildArtifactState:
    """Guarantee the output directory and its entry document exist.

    Creates the directory if needed and invokes *build* at most once when the
    entry document is absent. The entry document is checked again afterwards,
    since a successful build does not guarantee it was produced.

    Raises:
        OutputDirectoryError: The output directory could not be created.
        BuildError: The build invocation failed.
        EntryDocumentMissingError: The entry document is still absent after building.
    """
    state = inspect_build_artifacts(output_dir, entry_document)

    if not state.output_directory_exists:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise OutputDirectoryError(f"Failed to create {output_dir} directory: {error}") from error
        logger.info("Created %s directory", output_dir)

    if not state.entry_document_exists:
        logger.info("Building application...")
        try:
            build(build_command)
        except BuildError:
            raise
        except Exception as error:
            raise BuildError(f"Build failed: {error}") from error

    state = inspect_build_artifacts(output_dir, entry_document)
    if not state.entry_document_exists:
        raise EntryDocumentMissingError(
            f"Build completed but {entry_document} not found in {output_dir}"
        )
    return state
