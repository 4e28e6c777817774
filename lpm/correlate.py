"""Line up Dockerfile instructions with image layers to decide layer ownership

Both sequences are walked from the end: the last instruction produced the top
layer, the one before it the layer below, and so on until the base image
instruction (`FROM`). Every layer below that point came with the base image.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from lpm.dockerfile import Instruction
from lpm.oci.descriptor import Descriptor
from lpm.oci.manifest import Manifest
from lpm.ownership import NON_UPSTREAM, UPSTREAM

logger = logging.getLogger(__name__)

# Originating command of upstream layers when no instruction is left to blame
UNKNOWN_COMMAND = ""


@dataclass(slots=True)
class PairedCursor:
    """Two cursors stepping backward together over independent sequences"""

    instructions: Sequence[Instruction]
    layers: Sequence[Descriptor]
    instruction_index: int = field(init=False)
    layer_index: int = field(init=False)

    def __post_init__(self):
        self.instruction_index = len(self.instructions) - 1
        self.layer_index = len(self.layers) - 1

    @property
    def exhausted(self) -> bool:
        return self.instruction_index < 0 or self.layer_index < 0

    @property
    def instruction(self) -> Instruction | None:
        """Instruction under the cursor, None once the instructions ran out"""
        if self.instruction_index < 0:
            return None
        return self.instructions[self.instruction_index]

    @property
    def layer(self) -> Descriptor | None:
        if self.layer_index < 0:
            return None
        return self.layers[self.layer_index]

    def step(self):
        self.instruction_index -= 1
        self.layer_index -= 1


def annotate_manifest(
    instructions: Sequence[Instruction], manifest: Manifest
) -> Manifest:
    """Return a copy of `manifest` with ownership annotations on every layer

    The manifest and its config are owned by whoever builds the image, so they
    start out as non-upstream.
    """
    result = manifest.model_copy(deep=True)
    result.annotations = NON_UPSTREAM.annotations()
    result.config.annotations = NON_UPSTREAM.annotations()

    cursor = PairedCursor(instructions=instructions, layers=result.layers)
    while not cursor.exhausted:
        instruction = cursor.instruction
        if instruction.is_base_image:
            break
        logger.debug(
            "Layer %d is non-upstream, from %r",
            cursor.layer_index,
            instruction.original,
        )
        cursor.layer.annotations = NON_UPSTREAM.annotations(
            command=instruction.original
        )
        cursor.step()

    # Either the base image instruction or nothing left of the Dockerfile
    remaining = cursor.instruction
    command = remaining.original if remaining is not None else UNKNOWN_COMMAND
    for index in range(cursor.layer_index, -1, -1):
        logger.debug("Layer %d is upstream", index)
        result.layers[index].annotations = UPSTREAM.annotations(command=command)

    return result
