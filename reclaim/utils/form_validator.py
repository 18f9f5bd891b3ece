from datetime import date, time
from typing import List, Literal, Optional
from fastapi import HTTPException
from pydantic import BaseModel, Field, ValidationError, model_validator


class SecurityQuestion(BaseModel):
    question: str = Field(min_length=3, max_length=120)
    answer: str = Field(min_length=1, max_length=120)


class ValidatedReportItem(BaseModel):
    item_type: Literal["Wallet", "Phone", "ID Card", "Bag", "Keys", "Laptop", "Book", "Other"]
    other_details: Optional[str] = Field(default=None, max_length=60)
    location: str = Field(min_length=3, max_length=60)
    date_found: date
    time_found: time
    questions: List[SecurityQuestion] = Field(min_length=1, max_length=3)

    @model_validator(mode="after")
    def check_other_details(self):
        if self.item_type == "Other" and not self.other_details:
            raise ValueError("Please describe the item when choosing 'Other'")
        return self


def _pair(question: Optional[str], answer: Optional[str]) -> Optional[dict]:
    question = (question or "").strip()
    answer = (answer or "").strip()

    if not question and not answer:
        return None

    return {"question": question, "answer": answer}


def validate_report_item_form(
    item_type: str,
    location: str,
    date_found: str,
    time_found: str,
    question1: str,
    answer1: str,
    question2: Optional[str] = None,
    answer2: Optional[str] = None,
    question3: Optional[str] = None,
    answer3: Optional[str] = None,
    other_details: Optional[str] = None,
) -> ValidatedReportItem:
    try:
        parsed_date = date.fromisoformat(date_found)
        parsed_time = time.fromisoformat(time_found)
    except Exception:
        raise HTTPException(status_code=400, detail="Date or time not parseable")

    # the first pair is mandatory, the later two only when filled in
    questions = [{"question": (question1 or "").strip(), "answer": (answer1 or "").strip()}]
    questions += [
        pair for pair in (_pair(question2, answer2), _pair(question3, answer3)) if pair
    ]

    try:
        return ValidatedReportItem(
            item_type=item_type,
            other_details=(other_details or "").strip() or None,
            location=location.strip(),
            date_found=parsed_date,
            time_found=parsed_time,
            questions=questions,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )
