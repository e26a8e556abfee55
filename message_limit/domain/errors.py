from __future__ import annotations


class InvalidNumericInput(ValueError):
    """Сеттер limit/advance_count получил нечисловое или бесконечное значение."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be a finite number.")


class GenerationAborted(RuntimeError):
    """Перехватчик отменил генерацию до отправки запроса."""

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(reason or "generation aborted")
