from dataclasses import dataclass

from lpm import constants


@dataclass(frozen=True, slots=True)
class OwnershipTemplate:
    """Ownership annotations shared by every layer of one kind"""

    owner: str

    def annotations(self, command: str | None = None) -> dict[str, str]:
        """Return a new annotation mapping for a single descriptor

        :param command: The Dockerfile instruction the descriptor originates from.
        """
        result = {key: self.owner for key in constants.OWNERSHIP_KEYS}
        if command is not None:
            result[constants.ANNOTATION_DOCKERFILE_COMMAND] = command
        return result


UPSTREAM = OwnershipTemplate(constants.UPSTREAM)
NON_UPSTREAM = OwnershipTemplate(constants.NON_UPSTREAM)
