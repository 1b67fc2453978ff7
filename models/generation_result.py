from dataclasses import dataclass, field


@dataclass(frozen=True)
class GenerationError:
    template_id: str
    template_name: str
    error: str


@dataclass
class GenerationResult:
    """Outcome of one due-template batch for a plan."""
    generated_count: int = 0
    processed_template_ids: list[str] = field(default_factory=list)
    errors: list[GenerationError] = field(default_factory=list)

    def record_success(self, template_id: str) -> None:
        self.processed_template_ids.append(template_id)
        self.generated_count += 1

    def record_failure(self, template_id: str, template_name: str, error: str) -> None:
        self.errors.append(GenerationError(template_id, template_name, error))

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
