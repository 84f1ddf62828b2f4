"""Placeholder invoice metadata — random client and amount per upload."""

import random

from invoice_intake.application.interfaces import InvoiceMetadata, InvoiceMetadataGenerator


class RandomInvoiceMetadataGenerator(InvoiceMetadataGenerator):
    """Picks a client from a fixed list and a whole amount in ``[amount_min, amount_max)``.

    Stands in for real document parsing; the file content is ignored.
    """

    def __init__(
        self,
        client_names: list[str],
        amount_min: int = 500,
        amount_max: int = 10_500,
        rng: random.Random | None = None,
    ) -> None:
        if not client_names:
            raise ValueError("client_names must not be empty")
        if amount_min < 0 or amount_max <= amount_min:
            raise ValueError("amount range must be non-negative and non-empty")
        self._client_names = list(client_names)
        self._amount_min = amount_min
        self._amount_max = amount_max
        self._rng = rng or random.Random()

    def generate(self, file_name: str, content: bytes) -> InvoiceMetadata:
        return InvoiceMetadata(
            client_name=self._rng.choice(self._client_names),
            amount=self._rng.randrange(self._amount_min, self._amount_max),
        )
