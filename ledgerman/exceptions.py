"""
Exceptions for Ledgerman.

All errors are BaseError subclasses with a structured code for
programmatic handling.
"""

from typing import Any


class BaseError(Exception):
    """
    Structured exception base.

    Subclasses declare ``_default_messages`` mapping codes to
    human-readable messages. Extra keyword arguments are kept in ``data``.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.data:
            details = ', '.join(f'{k}={v}' for k, v in self.data.items())
            return f"[{self.code}] {self.message} ({details})"
        return f"[{self.code}] {self.message}"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': dict(self.data),
        }


class PostingError(BaseError):
    """
    Structured exception for document and posting operations.

    Usage:
        try:
            inventory.post(doc.pk)
        except PostingError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Só tem {e.on_hand} de {e.data['sku']}")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        # Posting
        'ALREADY_POSTED': 'Documento já foi lançado',
        'EMPTY_DOCUMENT': 'Documento sem linhas não pode ser lançado',
        'UNKNOWN_PRODUCT': 'Produto não encontrado para o SKU',
        'INSUFFICIENT_STOCK': 'Estoque insuficiente',
        'STORAGE_FAILURE': 'Falha ao gravar no banco de dados',
        'CONCURRENT_MODIFICATION': 'Modificação concorrente detectada',
        # Drafts
        'DOCUMENT_NOT_FOUND': 'Documento não encontrado',
        'DOCUMENT_POSTED': 'Documento lançado não pode ser alterado',
        'LINE_NOT_FOUND': 'Linha não encontrada',
        'INVALID_QUANTITY': 'Quantidade inválida',
        'INVALID_TYPE': 'Tipo de documento inválido',
        'WAREHOUSE_REQUIRED': 'Depósito é obrigatório',
        'SKU_REQUIRED': 'SKU é obrigatório',
    }

    @property
    def on_hand(self) -> int:
        """Shortcut for data['on_hand']."""
        return self.data.get('on_hand', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    @property
    def is_transient(self) -> bool:
        """Conflicts may succeed if the posting is planned again."""
        return self.code == 'CONCURRENT_MODIFICATION'
