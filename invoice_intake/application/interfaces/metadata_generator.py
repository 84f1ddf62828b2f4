"""Port for the business metadata attached to an uploaded invoice."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class InvoiceMetadata:
    client_name: str
    amount: float


class InvoiceMetadataGenerator(ABC):
    """Supplies client name and amount for a newly uploaded invoice."""

    @abstractmethod
    def generate(self, file_name: str, content: bytes) -> InvoiceMetadata:
        ...
