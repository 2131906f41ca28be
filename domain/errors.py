class KnowledgeBaseNotFoundError(KeyError):
    def __init__(self, kb_id: str):
        super().__init__(kb_id)
        self.kb_id = kb_id

    def __str__(self) -> str:
        return f"knowledge base not found: {self.kb_id}"


class KnowledgeBaseNotLoadedError(RuntimeError):
    def __init__(self, message: str = "no knowledge base loaded"):
        super().__init__(message)


class DimensionMismatchError(ValueError):
    pass


class UntrustedContextError(RuntimeError):
    pass


class LLMNotConfiguredError(RuntimeError):
    pass
