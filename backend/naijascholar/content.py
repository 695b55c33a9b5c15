from __future__ import annotations
from typing import List, Optional

from .models import PastQuestion


SUBJECTS: List[str] = [
	"Mathematics",
	"English Language",
	"Biology",
	"Physics",
	"Chemistry",
	"Economics",
	"Government",
	"Literature in English",
]


def _pq(id: int, subject: str, year: int, question: str, options: List[str], answer: str) -> PastQuestion:
	return PastQuestion(id=id, subject=subject, year=year, question=question, options=options, answer=answer)


# Curated WAEC/NECO/JAMB items; read-only at runtime
PAST_QUESTIONS: List[PastQuestion] = [
	_pq(1, "Mathematics", 2022,
		"If x - 2 is a factor of x³ - 5x² + kx + 4, find the value of k.",
		["A. -2", "B. 2", "C. 4", "D. -4"], "B. 2"),
	_pq(2, "English Language", 2021,
		"Choose the option that is nearest in meaning to the word in italics: The boy was very *recalcitrant*.",
		["A. obedient", "B. stubborn", "C. intelligent", "D. lazy"], "B. stubborn"),
	_pq(3, "Biology", 2022,
		"Which of the following is NOT a function of the liver?",
		["A. Production of bile", "B. Deamination of amino acids", "C. Production of insulin", "D. Detoxification"],
		"C. Production of insulin"),
	_pq(4, "Physics", 2020,
		"A car accelerates uniformly from rest at 4 m/s². How far does it travel in the 5th second?",
		["A. 18 m", "B. 32 m", "C. 50 m", "D. 100 m"], "A. 18 m"),
	_pq(5, "Chemistry", 2021,
		"Which of the following separation techniques is most suitable for separating a mixture of sand, ammonium chloride, and sodium chloride?",
		["A. Sublimation followed by filtration", "B. Sublimation followed by addition of water and evaporation",
		 "C. Sublimation followed by addition of water and filtration", "D. Filtration followed by evaporation"],
		"C. Sublimation followed by addition of water and filtration"),
	_pq(6, "Government", 2019,
		"Who is the head of the judiciary in Nigeria?",
		["A. The President", "B. The Senate President", "C. The Chief Justice of Nigeria", "D. The Attorney General"],
		"C. The Chief Justice of Nigeria"),
	_pq(7, "Literature in English", 2022,
		"The theme of colonialism is central to which of these books by Chinua Achebe?",
		["A. No Longer at Ease", "B. Things Fall Apart", "C. Arrow of God", "D. A Man of the People"],
		"B. Things Fall Apart"),
	_pq(8, "Economics", 2020,
		"An increase in the supply of a commodity, with demand remaining constant, will lead to...",
		["A. a fall in price", "B. a rise in price", "C. no change in price", "D. an initial rise then fall in price"],
		"A. a fall in price"),
	_pq(9, "Mathematics", 2019,
		"Solve for y in the equation 2y + 5 = 15.",
		["A. y = 10", "B. y = 7.5", "C. y = 5", "D. y = 20"], "C. y = 5"),
	_pq(10, "English Language", 2022,
		"From the words lettered A to D, choose the word that has the same vowel sound as the one in the word: Seat",
		["A. Sit", "B. Set", "C. Key", "D. Site"], "C. Key"),
	_pq(11, "Physics", 2021,
		"What is the standard international (SI) unit of electrical resistance?",
		["A. Ampere", "B. Volt", "C. Watt", "D. Ohm"], "D. Ohm"),
	_pq(12, "Chemistry", 2020,
		"The process of coating a metal with a thin layer of another metal using electricity is called?",
		["A. Galvanization", "B. Electroplating", "C. Smelting", "D. Annealing"], "B. Electroplating"),
	_pq(13, "Biology", 2021,
		"The part of the cell responsible for generating most of the cell's supply of adenosine triphosphate (ATP), used as a source of chemical energy, is the:",
		["A. Nucleus", "B. Ribosome", "C. Mitochondrion", "D. Cell wall"], "C. Mitochondrion"),
	_pq(14, "Government", 2020,
		"A system of government where the head of state is also the head of government is known as:",
		["A. Parliamentary System", "B. Presidential System", "C. Monarchical System", "D. Feudal System"],
		"B. Presidential System"),
	_pq(15, "Economics", 2022,
		"The desire for a commodity backed by the ability to pay is known as:",
		["A. Want", "B. Need", "C. Effective Demand", "D. Supply"], "C. Effective Demand"),
]


def past_questions_for(subject: Optional[str] = None) -> List[PastQuestion]:
	if not subject:
		return list(PAST_QUESTIONS)
	return [q for q in PAST_QUESTIONS if q.subject == subject]
