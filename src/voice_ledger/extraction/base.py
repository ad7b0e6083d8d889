from abc import ABC, abstractmethod


class Extractor(ABC):
    @abstractmethod
    async def extract(self, text: str) -> str | None:
        """Return the raw JSON text describing the transaction in ``text``."""
        pass
