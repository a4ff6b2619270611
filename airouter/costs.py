"""Credit cost estimation for generation requests."""

from airouter.catalog import ModelInfo
from airouter.util import estimate_tokens

# Image models are billed as a flat allowance of tokens per generated image
IMAGE_TOKEN_ALLOWANCE = 1000


class InsufficientCredits(Exception):
    def __init__(self, balance: float, attempted: float):
        self.balance = balance
        self.attempted = attempted
        super().__init__(
            f"Insufficient credits: balance {balance:.4f} is below the "
            f"{attempted:.4f} credits this request needs"
        )


def billable_tokens(model: ModelInfo, prompt: str) -> int:
    if model.kind == "image":
        return IMAGE_TOKEN_ALLOWANCE
    return estimate_tokens(prompt)


def estimate_cost(model: ModelInfo, prompt: str) -> float:
    return round(billable_tokens(model, prompt) * model.pricePerToken, 6)
