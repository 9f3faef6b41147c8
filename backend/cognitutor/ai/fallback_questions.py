"""
CogniTutor - Fallback Question Bank
Static, well-formed assessment questions used whenever generation fails
or returns fewer valid questions than required.
"""
from cognitutor.schemas.assessment import AssessmentQuestion


def _q(n, prompt, options, correct, difficulty, category) -> AssessmentQuestion:
    return AssessmentQuestion(
        id=f"q_{n}",
        prompt=prompt,
        options=options,
        correct_option_index=correct,
        difficulty=difficulty,
        category=category,
    )


FALLBACK_QUESTIONS: tuple[AssessmentQuestion, ...] = (
    _q(1, "What comes next in the sequence: 2, 4, 8, 16, ?",
       ("24", "32", "30", "28"), 1, "medium", "mathematical"),
    _q(2, "Which word does not belong: Apple, Orange, Car, Banana",
       ("Apple", "Orange", "Car", "Banana"), 2, "easy", "verbal"),
    _q(3, "If all roses are flowers and some flowers are red, which statement is definitely true?",
       ("All roses are red", "Some roses are red", "Some roses might be red", "No roses are red"),
       2, "medium", "logical"),
    _q(4, "Complete the pattern: Triangle, Circle, Square, Triangle, Circle, ?",
       ("Triangle", "Circle", "Square", "Diamond"), 2, "easy", "spatial"),
    _q(5, "What is 15% of 200?",
       ("25", "30", "35", "40"), 1, "medium", "mathematical"),
    _q(6, "Which number should replace the question mark: 3, 6, 12, 24, ?",
       ("36", "48", "42", "54"), 1, "medium", "mathematical"),
    _q(7, "Book is to Reading as Fork is to:",
       ("Eating", "Kitchen", "Spoon", "Food"), 0, "easy", "verbal"),
    _q(8, "If you rearrange the letters 'CIFAIPC', you get the name of a:",
       ("Country", "Animal", "Ocean", "City"), 2, "hard", "verbal"),
    _q(9, "Which comes next in the logical sequence: Monday, Wednesday, Friday, ?",
       ("Saturday", "Sunday", "Tuesday", "Thursday"), 1, "medium", "logical"),
    _q(10, "What is the next number: 1, 1, 2, 3, 5, 8, ?",
       ("11", "13", "15", "17"), 1, "hard", "mathematical"),
    _q(11, "All birds can fly. Penguins are birds. Therefore:",
       ("Penguins can fly", "The statement is contradictory",
        "Penguins are not birds", "Some birds cannot fly"),
       1, "medium", "logical"),
    _q(12, "Which word means the opposite of 'abundant'?",
       ("Plentiful", "Scarce", "Multiple", "Various"), 1, "easy", "verbal"),
    _q(13, "If 5 machines make 5 widgets in 5 minutes, how long does it take 100 machines to make 100 widgets?",
       ("5 minutes", "20 minutes", "100 minutes", "500 minutes"), 0, "hard", "logical"),
    _q(14, "What comes next: A1, B2, C3, D4, ?",
       ("E5", "F6", "E4", "D5"), 0, "easy", "spatial"),
    _q(15, "Which number is missing: 2, 6, 12, 20, 30, ?",
       ("40", "42", "45", "48"), 1, "medium", "mathematical"),
    _q(16, "Water is to Ice as Milk is to:",
       ("Cream", "Cheese", "Liquid", "White"), 1, "medium", "verbal"),
    _q(17, "If some cats are dogs and all dogs are animals, then:",
       ("Some cats are animals", "All cats are dogs", "No cats are animals", "All animals are cats"),
       0, "medium", "logical"),
    _q(18, "Which shape has the most sides?",
       ("Hexagon", "Pentagon", "Octagon", "Heptagon"), 2, "easy", "spatial"),
    _q(19, "What is 25% of 80?",
       ("15", "20", "25", "30"), 1, "easy", "mathematical"),
    _q(20, "Complete the analogy: Hot is to Cold as Light is to:",
       ("Bright", "Dark", "Heavy", "Fast"), 1, "easy", "verbal"),
)


def get_fallback_questions() -> list[AssessmentQuestion]:
    """Return the fallback bank as a new list; the entries themselves are frozen."""
    return list(FALLBACK_QUESTIONS)
