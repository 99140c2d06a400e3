from enum import Enum


class ReviewOption(str, Enum):
    EASY = "easy"
    DIFFICULT = "difficult"
    FORGOT = "forgot"

    @property
    def implies_success(self) -> bool:
        return self is not ReviewOption.FORGOT


REVIEW_OPTION_LABELS = {
    ReviewOption.EASY: "Easy",
    ReviewOption.DIFFICULT: "Difficult",
    ReviewOption.FORGOT: "Forgot",
}
