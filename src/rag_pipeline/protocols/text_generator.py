"""Text generator protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextGenerator(Protocol):
    """Protocol for generative text models.

    ``generate`` makes exactly one attempt and raises ``PipelineError``
    subclasses on failure.
    """

    @property
    def model_name(self) -> str:
        ...

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Args:
            prompt: The fully assembled instruction

        Returns:
            The generated text
        """
        ...
