"""
Academic Reference Data
=======================

Bundled reference material for the writing assistant: common essay types with
short example essays, thesis formats and a per-level checklist, thesis and
essay marking schemes, and practical writing tips.

The marking schemes double as the rubrics used for AI reviews, so essay types
in ``ESSAY_MARKING_SCHEME`` must match the ``type`` names used by the review
endpoints, and thesis chapters must match across levels.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel


UNDERGRADUATE = "Undergraduate"
MASTERS = "Master’s"
DOCTORAL = "Doctoral"

EssayLevel = Literal["Undergraduate", "Master’s"]

EXAMPLE_ESSAY_TYPE = "Argumentative / persuasive"


class RubricNotFoundError(LookupError):
	"""Raised when a level, essay type or thesis chapter has no rubric."""


# ============================================================================
# TYPES
# ============================================================================

class ExampleEssay(BaseModel):
	title: str
	description: str
	text: str


class EssayType(BaseModel):
	type: str
	core_purpose: str
	typical_disciplines: str
	level: EssayLevel
	example_essay: ExampleEssay


class ThesisFormat(BaseModel):
	level: str
	common_thesis_types: str
	typical_purpose: str


class ThesisChecklistItem(BaseModel):
	item: str
	undergraduate: str
	masters: str
	doctoral: str


class MarkingSchemeItem(BaseModel):
	chapter: str
	weight: str
	core_rubric: str
	penalty_triggers: str


class ThesisMarkingScheme(BaseModel):
	level: str
	items: List[MarkingSchemeItem]


class EssayMarkingSchemeItem(BaseModel):
	type: str
	core_rubric: str
	weight: str
	penalty_triggers: str


class EssayMarkingScheme(BaseModel):
	level: str
	items: List[EssayMarkingSchemeItem]


class WritingTip(BaseModel):
	area: str
	what_to_do: str
	why_it_works: str
	quick_start_tools: str


# ============================================================================
# ESSAY TYPES
# ============================================================================

COMMON_ESSAY_TYPES: List[EssayType] = [
	EssayType(
		type="Argumentative / persuasive",
		core_purpose="Take a clear position on a debatable issue and defend it with evidence while addressing counter-arguments.",
		typical_disciplines="Law, Political Science, Philosophy, Sociology, Education",
		level=UNDERGRADUATE,
		example_essay=ExampleEssay(
			title="Should University Lectures Be Recorded?",
			description="A short argumentative essay with a clear thesis, two supporting arguments, a rebuttal and a conclusion.",
			text=(
				"Universities should record all lectures and make them available to enrolled students. "
				"Recorded lectures improve learning outcomes, widen access, and cost institutions very little.\n\n"
				"First, recordings allow students to revisit difficult material at their own pace. A student who "
				"misses a derivation in a statistics lecture can pause, rewind and take notes until the step is clear. "
				"Studies of lecture capture report that students mainly use recordings for revision rather than as a "
				"replacement for attendance.\n\n"
				"Second, recordings support students who work, care for family members, or live with disabilities. "
				"For these students a single missed session can mean falling behind for weeks.\n\n"
				"Critics argue that recordings reduce attendance and discourage participation. However, attendance "
				"depends far more on the quality of teaching than on the existence of a video, and active learning "
				"tasks can be reserved for live sessions.\n\n"
				"In conclusion, the benefits of recorded lectures clearly outweigh the risks. Universities that "
				"adopt lecture capture make learning more flexible, inclusive and effective."
			),
		),
	),
	EssayType(
		type="Expository / explanatory",
		core_purpose="Explain a concept, process or phenomenon objectively and clearly, without arguing for a position.",
		typical_disciplines="Sciences, Engineering, Health Sciences, Economics",
		level=UNDERGRADUATE,
		example_essay=ExampleEssay(
			title="How Vaccines Train the Immune System",
			description="An explanatory essay that walks the reader through a process step by step.",
			text=(
				"Vaccines prepare the immune system to recognise a pathogen before a real infection occurs. "
				"A vaccine introduces an antigen, a harmless fragment or weakened form of the pathogen, into the body.\n\n"
				"Antigen-presenting cells capture the antigen and display it to helper T cells, which in turn "
				"activate B cells. Activated B cells produce antibodies that bind to the antigen, and some of them "
				"become long-lived memory cells.\n\n"
				"If the vaccinated person later meets the real pathogen, memory cells respond within days rather than "
				"weeks. This faster response usually prevents severe illness.\n\n"
				"In short, vaccines work by rehearsing the immune response in advance."
			),
		),
	),
	EssayType(
		type="Compare and contrast",
		core_purpose="Examine similarities and differences between two or more subjects against explicit criteria.",
		typical_disciplines="Literature, History, Business, Education",
		level=UNDERGRADUATE,
		example_essay=ExampleEssay(
			title="Online and Face-to-Face Learning",
			description="A point-by-point comparison organised around three criteria.",
			text=(
				"Online and face-to-face learning both aim to help students master course content, but they differ "
				"in flexibility, interaction and cost.\n\n"
				"Online learning offers greater flexibility because students can study at any time. Face-to-face "
				"learning, by contrast, follows a fixed timetable that suits students who need external structure.\n\n"
				"Interaction is richer in the classroom, where questions are answered immediately. Online courses "
				"rely on forums and video calls, which can feel slower and less personal.\n\n"
				"Finally, online courses are often cheaper to deliver and to attend. Overall, neither mode is "
				"superior in every respect; the best choice depends on the learner's circumstances."
			),
		),
	),
	EssayType(
		type="Cause and effect",
		core_purpose="Analyse why something happened and what consequences followed, distinguishing correlation from causation.",
		typical_disciplines="History, Environmental Science, Economics, Public Health",
		level=UNDERGRADUATE,
		example_essay=ExampleEssay(
			title="Causes and Effects of Urban Heat Islands",
			description="An essay that links causes to effects with explicit causal language.",
			text=(
				"Cities are often several degrees warmer than the surrounding countryside. This urban heat island "
				"effect has three main causes.\n\n"
				"Dark surfaces such as asphalt absorb sunlight and release heat at night. Buildings block wind and "
				"trap warm air. Vehicles and air conditioners add waste heat.\n\n"
				"As a result, residents face higher energy bills, poorer air quality and a greater risk of heat-related "
				"illness during heatwaves. Green roofs, reflective paving and urban trees can reduce these effects."
			),
		),
	),
	EssayType(
		type="Critical review / critique",
		core_purpose="Evaluate a text, artwork, policy or study by summarising it and judging its strengths and weaknesses.",
		typical_disciplines="Humanities, Psychology, Media Studies, Nursing",
		level=UNDERGRADUATE,
		example_essay=ExampleEssay(
			title="A Critique of a Study on Screen Time and Sleep",
			description="A short critique that balances summary and evaluation.",
			text=(
				"The study examined whether evening screen use affects sleep quality among 200 undergraduate students. "
				"Participants completed a sleep diary for two weeks.\n\n"
				"A key strength is the use of daily diaries, which reduce recall bias. However, the sample came from a "
				"single university, which limits generalisability. Moreover, the design was correlational, so the "
				"authors' claim that screens cause poor sleep is not supported.\n\n"
				"Overall, the study offers useful preliminary evidence but requires experimental follow-up."
			),
		),
	),
	EssayType(
		type="Reflective",
		core_purpose="Describe an experience, analyse it using theory, and identify what was learned and what will change.",
		typical_disciplines="Nursing, Teacher Education, Social Work, Management",
		level=UNDERGRADUATE,
		example_essay=ExampleEssay(
			title="Reflecting on a Group Project",
			description="A reflective piece structured with Gibbs' reflective cycle.",
			text=(
				"During my second-year group project, our team missed the first deadline because tasks were unclear. "
				"I felt frustrated and assumed others were not contributing.\n\n"
				"Looking back with Tuckman's model of group development, our team was still in the storming stage. "
				"We had not agreed on roles or communication norms.\n\n"
				"I learned that clarifying expectations early is essential. In future projects I will propose a shared "
				"task board during the first meeting."
			),
		),
	),
	EssayType(
		type="Literature review",
		core_purpose="Synthesise and critically evaluate existing research to map a field and identify gaps.",
		typical_disciplines="All research-based disciplines",
		level=MASTERS,
		example_essay=ExampleEssay(
			title="Gamification in Higher Education: A Review",
			description="A thematic literature review that synthesises rather than summarises sources.",
			text=(
				"Research on gamification in higher education has grown rapidly since 2012. Three themes dominate the "
				"literature: motivation, engagement and learning outcomes.\n\n"
				"Studies grounded in self-determination theory report short-term gains in motivation, although these "
				"effects often fade after the novelty period. Engagement studies rely heavily on self-report measures, "
				"which limits the strength of their conclusions.\n\n"
				"Few studies measure long-term learning outcomes. This gap suggests a need for longitudinal designs "
				"with objective performance measures."
			),
		),
	),
	EssayType(
		type="Research proposal",
		core_purpose="Justify a research question and set out a feasible design, methods, ethics and timeline.",
		typical_disciplines="Social Sciences, Education, Health, Engineering",
		level=MASTERS,
		example_essay=ExampleEssay(
			title="Proposal: Peer Feedback in Online Writing Courses",
			description="A condensed research proposal with aims, method and significance.",
			text=(
				"This study asks whether structured peer feedback improves argument quality in online academic writing "
				"courses. Prior research has focused on face-to-face settings.\n\n"
				"A quasi-experimental design will compare two cohorts of 60 students. Essays will be scored with an "
				"analytic rubric by two blinded raters, and inter-rater reliability will be reported.\n\n"
				"Ethical approval will be sought before data collection. The findings will inform the design of "
				"scalable feedback practices in online programmes."
			),
		),
	),
	EssayType(
		type="Critical analysis",
		core_purpose="Interrogate theories, arguments or evidence in depth, drawing on scholarly frameworks to reach a defended judgement.",
		typical_disciplines="Humanities, Social Sciences, Business, Law",
		level=MASTERS,
		example_essay=ExampleEssay(
			title="The Limits of Nudge Theory in Public Policy",
			description="A critical analysis that weighs a theory against evidence and alternative frameworks.",
			text=(
				"Nudge theory claims that small changes in choice architecture can steer behaviour without restricting "
				"freedom. Its appeal to policymakers lies in low cost and political neutrality.\n\n"
				"However, meta-analyses reveal that published effect sizes shrink substantially once publication bias "
				"is corrected. Furthermore, nudges treat structural problems as individual ones.\n\n"
				"Nudges are therefore best understood as a complement to, not a substitute for, regulation."
			),
		),
	),
	EssayType(
		type="Policy brief / position paper",
		core_purpose="Present evidence-based recommendations on a policy problem for a non-specialist decision-maker.",
		typical_disciplines="Public Policy, Public Health, International Relations, Environmental Management",
		level=MASTERS,
		example_essay=ExampleEssay(
			title="Reducing Food Waste in University Canteens",
			description="A short policy brief with a problem statement, options and a recommendation.",
			text=(
				"University canteens discard an estimated 20 percent of prepared food. This brief evaluates three "
				"options: tray-less dining, dynamic menu planning and food donation partnerships.\n\n"
				"Tray-less dining is cheap but unpopular. Dynamic menu planning requires investment in data systems "
				"but delivers the largest reduction.\n\n"
				"We recommend piloting dynamic menu planning in two canteens for one semester."
			),
		),
	),
]


# ============================================================================
# THESIS FORMATS AND CHECKLIST
# ============================================================================

THESIS_FORMATS: List[ThesisFormat] = [
	ThesisFormat(
		level=UNDERGRADUATE,
		common_thesis_types="Honours thesis, capstone project, dissertation (UK), extended essay",
		typical_purpose="Demonstrate the ability to carry out a supervised, small-scale study: Introduction, Literature Review, Methodology, Results, Discussion, Conclusion (8,000–15,000 words).",
	),
	ThesisFormat(
		level=MASTERS,
		common_thesis_types="Research thesis, project-based thesis, thesis by publication (rare)",
		typical_purpose="Show independent research competence and critical engagement with the field, often with a modest original contribution (15,000–40,000 words).",
	),
	ThesisFormat(
		level=DOCTORAL,
		common_thesis_types="Monograph, thesis by publication, practice-based PhD with exegesis",
		typical_purpose="Make a significant, original contribution to knowledge that is publishable and defended at viva (60,000–100,000 words).",
	),
]

THESIS_CHECKLIST: List[ThesisChecklistItem] = [
	ThesisChecklistItem(
		item="Research question",
		undergraduate="Clear and answerable within one semester",
		masters="Focused, justified by a gap in the literature",
		doctoral="Original, significant and sustained across chapters",
	),
	ThesisChecklistItem(
		item="Literature engagement",
		undergraduate="20–40 sources, mostly summarised accurately",
		masters="40–80 sources, critically synthesised",
		doctoral="Comprehensive, positions the thesis within ongoing debates",
	),
	ThesisChecklistItem(
		item="Methodology",
		undergraduate="Appropriate method described and applied correctly",
		masters="Method justified against alternatives, limitations acknowledged",
		doctoral="Rigorous, defensible, possibly methodologically novel",
	),
	ThesisChecklistItem(
		item="Contribution",
		undergraduate="Competent application of existing knowledge",
		masters="Modest original insight or application",
		doctoral="Significant original contribution to knowledge",
	),
	ThesisChecklistItem(
		item="Presentation",
		undergraduate="Correct referencing, clear structure",
		masters="Polished academic style, consistent formatting",
		doctoral="Publication-ready prose and presentation",
	),
]


# ============================================================================
# MARKING SCHEMES
# ============================================================================

def _thesis_items(level_focus: str, originality: str, lit_depth: str, method_rigour: str) -> List[MarkingSchemeItem]:
	return [
		MarkingSchemeItem(
			chapter="Abstract",
			weight="5%",
			core_rubric=f"States the problem, method, key findings and implications in under 300 words; {level_focus}.",
			penalty_triggers="No findings reported\nExceeds word limit\nIntroduces material not in the thesis",
		),
		MarkingSchemeItem(
			chapter="Introduction",
			weight="10%",
			core_rubric=f"Establishes context, states the research problem and questions, explains significance and outlines the structure; {originality}.",
			penalty_triggers="Research question missing or vague\nNo justification of significance\nNo chapter outline",
		),
		MarkingSchemeItem(
			chapter="Literature Review",
			weight="20%",
			core_rubric=f"Critically synthesises relevant literature thematically, identifies the gap the study addresses; {lit_depth}.",
			penalty_triggers="Descriptive list of sources without synthesis\nOutdated or non-scholarly sources dominate\nNo gap identified",
		),
		MarkingSchemeItem(
			chapter="Methodology",
			weight="20%",
			core_rubric=f"Justifies design, sampling, instruments and analysis; addresses validity, reliability and ethics; {method_rigour}.",
			penalty_triggers="Method does not match research question\nNo ethics statement\nInsufficient detail to replicate",
		),
		MarkingSchemeItem(
			chapter="Results / Findings",
			weight="15%",
			core_rubric="Presents findings clearly and accurately with appropriate tables or figures, without interpretation creeping in.",
			penalty_triggers="Results not linked to research questions\nMislabelled or unreadable figures\nStatistical errors",
		),
		MarkingSchemeItem(
			chapter="Discussion",
			weight="20%",
			core_rubric=f"Interprets findings against the literature, explains unexpected results, acknowledges limitations; {originality}.",
			penalty_triggers="Repeats results without interpretation\nOverclaims beyond the data\nLimitations ignored",
		),
		MarkingSchemeItem(
			chapter="Conclusion",
			weight="10%",
			core_rubric="Answers the research questions directly, states the contribution and recommends future work.",
			penalty_triggers="New evidence introduced\nResearch questions not answered\nGeneric recommendations",
		),
	]


THESIS_MARKING_SCHEME: List[ThesisMarkingScheme] = [
	ThesisMarkingScheme(
		level=UNDERGRADUATE,
		items=_thesis_items(
			"clarity matters more than sophistication",
			"a clear, manageable contribution is sufficient",
			"covers core sources accurately",
			"an established method applied correctly",
		),
	),
	ThesisMarkingScheme(
		level=MASTERS,
		items=_thesis_items(
			"reads as a stand-alone summary of a research project",
			"shows a modest original insight",
			"evaluates competing perspectives critically",
			"choices are defended against alternatives",
		),
	),
	ThesisMarkingScheme(
		level=DOCTORAL,
		items=_thesis_items(
			"communicates the original contribution explicitly",
			"makes a significant, original contribution to knowledge",
			"positions the work within current scholarly debates",
			"design is rigorous enough to withstand examination at viva",
		),
	),
]


ESSAY_MARKING_SCHEME: List[EssayMarkingScheme] = [
	EssayMarkingScheme(
		level=UNDERGRADUATE,
		items=[
			EssayMarkingSchemeItem(
				type="Argumentative / persuasive",
				core_rubric="Thesis clarity (20%), quality of evidence (30%), counter-argument and rebuttal (20%), structure and coherence (20%), language and referencing (10%).",
				weight="100% of essay grade",
				penalty_triggers="No identifiable thesis statement\nClaims unsupported by evidence\nCounter-arguments ignored\nInformal tone or missing citations",
			),
			EssayMarkingSchemeItem(
				type="Expository / explanatory",
				core_rubric="Accuracy of explanation (35%), logical sequencing (25%), use of examples (20%), clarity of language (20%).",
				weight="100% of essay grade",
				penalty_triggers="Factual errors\nPersonal opinion presented as fact\nSteps out of order",
			),
			EssayMarkingSchemeItem(
				type="Compare and contrast",
				core_rubric="Explicit criteria for comparison (25%), balance between subjects (25%), depth of analysis (30%), conclusion that evaluates (20%).",
				weight="100% of essay grade",
				penalty_triggers="Only similarities or only differences\nSubjects discussed separately without comparison\nNo evaluative conclusion",
			),
			EssayMarkingSchemeItem(
				type="Cause and effect",
				core_rubric="Identification of causes (25%), explanation of causal links (30%), evidence (25%), organisation (20%).",
				weight="100% of essay grade",
				penalty_triggers="Correlation treated as causation\nOversimplified single cause\nEffects listed without explanation",
			),
			EssayMarkingSchemeItem(
				type="Critical review / critique",
				core_rubric="Accurate summary (20%), evaluation of strengths and weaknesses (40%), use of criteria and evidence (25%), academic style (15%).",
				weight="100% of essay grade",
				penalty_triggers="Summary dominates evaluation\nPurely negative or purely positive\nNo criteria for judgement",
			),
			EssayMarkingSchemeItem(
				type="Reflective",
				core_rubric="Description of experience (15%), analysis using theory (35%), insight and learning (30%), action plan (20%).",
				weight="100% of essay grade",
				penalty_triggers="Purely descriptive\nNo link to theory or literature\nNo future action identified",
			),
		],
	),
	EssayMarkingScheme(
		level=MASTERS,
		items=[
			EssayMarkingSchemeItem(
				type="Literature review",
				core_rubric="Scope and search strategy (15%), synthesis across sources (35%), critical evaluation (30%), identification of gaps (20%).",
				weight="100% of essay grade",
				penalty_triggers="Annotated-bibliography style\nNo search strategy\nGap not identified or not justified",
			),
			EssayMarkingSchemeItem(
				type="Research proposal",
				core_rubric="Research question and rationale (25%), design and methods (35%), ethics and feasibility (20%), significance (20%).",
				weight="100% of essay grade",
				penalty_triggers="Question too broad\nMethods do not answer the question\nEthics omitted\nUnrealistic timeline",
			),
			EssayMarkingSchemeItem(
				type="Argumentative / persuasive",
				core_rubric="Sophistication of thesis (20%), scholarly evidence (30%), engagement with competing positions (25%), coherence (15%), style and referencing (10%).",
				weight="100% of essay grade",
				penalty_triggers="Reliance on non-scholarly sources\nStraw-man counter-arguments\nNo original position",
			),
			EssayMarkingSchemeItem(
				type="Critical analysis",
				core_rubric="Depth of critique (35%), use of theoretical frameworks (25%), quality of evidence (20%), defended judgement (20%).",
				weight="100% of essay grade",
				penalty_triggers="Description instead of analysis\nFrameworks named but not applied\nNo final judgement",
			),
			EssayMarkingSchemeItem(
				type="Policy brief / position paper",
				core_rubric="Problem definition (20%), evidence base (30%), evaluation of options (30%), actionable recommendation (20%).",
				weight="100% of essay grade",
				penalty_triggers="Jargon for a lay audience\nOptions not compared\nRecommendation not feasible",
			),
		],
	),
]


# ============================================================================
# WRITING TIPS
# ============================================================================

WRITING_TIPS: List[WritingTip] = [
	WritingTip(
		area="Planning",
		what_to_do="Write a one-sentence thesis and a reverse outline before drafting.",
		why_it_works="Forces a clear argument and exposes gaps in structure early.",
		quick_start_tools="Mind maps, outline templates, the assignment brief",
	),
	WritingTip(
		area="Paragraphing",
		what_to_do="Use PEEL: Point, Evidence, Explanation, Link.",
		why_it_works="Every paragraph advances the argument instead of listing facts.",
		quick_start_tools="PEEL checklist, topic-sentence highlighter",
	),
	WritingTip(
		area="Evidence",
		what_to_do="Prefer recent peer-reviewed sources and explain why each piece of evidence matters.",
		why_it_works="Markers reward analysis of evidence, not its quantity.",
		quick_start_tools="Google Scholar, library databases, citation managers (Zotero, Mendeley)",
	),
	WritingTip(
		area="Critical thinking",
		what_to_do="Ask how, why and so what for each claim; address at least one counter-argument.",
		why_it_works="Moves writing from description to evaluation, which unlocks higher grade bands.",
		quick_start_tools="Critical questions list, argument mapping",
	),
	WritingTip(
		area="Referencing",
		what_to_do="Choose one style (APA, Harvard, MLA) and apply it consistently from the first draft.",
		why_it_works="Avoids plagiarism penalties and last-minute formatting errors.",
		quick_start_tools="Zotero, style guides, reference checker",
	),
	WritingTip(
		area="Editing",
		what_to_do="Edit in separate passes: structure, then clarity, then grammar and formatting.",
		why_it_works="Focusing on one layer at a time catches more problems.",
		quick_start_tools="Read-aloud tools, grammar checkers, rubric self-assessment",
	),
]


# ============================================================================
# LOOKUPS
# ============================================================================

def essay_types_for(level: str) -> List[str]:
	scheme = next((s for s in ESSAY_MARKING_SCHEME if s.level == level), None)
	return [item.type for item in scheme.items] if scheme else []


def thesis_chapters_for(level: str) -> List[str]:
	scheme = next((s for s in THESIS_MARKING_SCHEME if s.level == level), None)
	return [item.chapter for item in scheme.items] if scheme else []


def find_essay_rubric(level: str, essay_type: str) -> EssayMarkingSchemeItem:
	scheme = next((s for s in ESSAY_MARKING_SCHEME if s.level == level), None)
	if scheme is None:
		raise RubricNotFoundError(f"{level} marking scheme not found.")
	rubric = next((item for item in scheme.items if item.type == essay_type), None)
	if rubric is None:
		raise RubricNotFoundError(f'Rubric for essay type "{essay_type}" at {level} level not found.')
	return rubric


def find_thesis_rubric(level: str, chapter: str) -> MarkingSchemeItem:
	scheme = next((s for s in THESIS_MARKING_SCHEME if s.level == level), None)
	if scheme is None:
		raise RubricNotFoundError(f"{level} thesis marking scheme not found.")
	rubric = next((item for item in scheme.items if item.chapter == chapter), None)
	if rubric is None:
		raise RubricNotFoundError(f'Rubric for thesis chapter "{chapter}" at {level} level not found.')
	return rubric


def example_essay() -> EssayType:
	"""Essay loaded by the reviewer's "load example" action."""
	found = next((e for e in COMMON_ESSAY_TYPES if e.type == EXAMPLE_ESSAY_TYPE), None)
	if found is not None:
		return found
	return next(e for e in COMMON_ESSAY_TYPES if e.level == UNDERGRADUATE)


def full_text_context() -> str:
	"""Render the whole data set as the chat assistant's system instruction."""
	lines: List[str] = [
		"You are a friendly and knowledgeable academic writing assistant. Answer questions about essay types, "
		"thesis formats, marking schemes and writing technique using the reference material below. "
		"If a question falls outside this material, answer from general academic knowledge and say so.",
		"",
		"## Common Essay Types",
	]
	for e in COMMON_ESSAY_TYPES:
		lines.append(f"- {e.type} ({e.level}): {e.core_purpose} Typical disciplines: {e.typical_disciplines}.")
	lines += ["", "## Thesis Formats"]
	for f in THESIS_FORMATS:
		lines.append(f"- {f.level}: {f.common_thesis_types}. {f.typical_purpose}")
	lines += ["", "## Thesis Checklist (Undergraduate / Master’s / Doctoral)"]
	for c in THESIS_CHECKLIST:
		lines.append(f"- {c.item}: {c.undergraduate} / {c.masters} / {c.doctoral}")
	lines += ["", "## Thesis Marking Scheme"]
	for scheme in THESIS_MARKING_SCHEME:
		lines.append(f"### {scheme.level}")
		for item in scheme.items:
			triggers = "; ".join(item.penalty_triggers.splitlines())
			lines.append(f"- {item.chapter} ({item.weight}): {item.core_rubric} Penalty triggers: {triggers}.")
	lines += ["", "## Essay Marking Scheme"]
	for scheme in ESSAY_MARKING_SCHEME:
		lines.append(f"### {scheme.level}")
		for item in scheme.items:
			triggers = "; ".join(item.penalty_triggers.splitlines())
			lines.append(f"- {item.type} ({item.weight}): {item.core_rubric} Penalty triggers: {triggers}.")
	lines += ["", "## Writing Tips"]
	for t in WRITING_TIPS:
		lines.append(f"- {t.area}: {t.what_to_do} Why: {t.why_it_works} Tools: {t.quick_start_tools}.")
	return "\n".join(lines)
