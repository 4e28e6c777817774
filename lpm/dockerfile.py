"""Dockerfile instruction parsing

Each logical instruction (continuation lines and heredocs included) with its
name and original text, as parsed by the buildkit Dockerfile parser.

ref: https://docs.docker.com/reference/dockerfile/
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import dockerfile

logger = logging.getLogger(__name__)

BASE_IMAGE_INSTRUCTION = "FROM"


class DockerfileError(ValueError):
    """Raised for Dockerfile content that can not be parsed."""


@dataclass(frozen=True, slots=True)
class Instruction:
    index: int
    name: str
    original: str

    @property
    def is_base_image(self) -> bool:
        return self.name.upper() == BASE_IMAGE_INSTRUCTION


def _instructions(commands: Iterable[dockerfile.Command]) -> list[Instruction]:
    instructions = [
        Instruction(index=index, name=command.cmd.upper(), original=command.original)
        for index, command in enumerate(commands)
    ]
    logger.debug("Parsed %d instructions", len(instructions))
    return instructions


def parse(text: str) -> list[Instruction]:
    """Parse Dockerfile content into its instructions, first to last"""
    try:
        return _instructions(dockerfile.parse_string(text))
    except dockerfile.GoParseError as e:
        raise DockerfileError(str(e)) from e


def parse_file(path: Path) -> list[Instruction]:
    """Parse the Dockerfile at `path`"""
    if not path.is_file():
        raise ValueError(f"{path} is not a file")
    try:
        return _instructions(dockerfile.parse_file(str(path)))
    except (dockerfile.GoIOError, dockerfile.GoParseError) as e:
        raise DockerfileError(f"{path}: {e}") from e
