# proofing/rules.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Sequence, Union

import regex as re

from proofing.detect_clauses import FINITE_VERBS, SUBJECTS
from proofing.errors import MalformedRule
from proofing.models import Category

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Rule fields: fixed values, format templates, or pure functions of the match
# ---------------------------------------------------------------------
def _groups(match) -> List[str]:
    return [match.group(0)] + [g or "" for g in match.groups()]


@dataclass(frozen=True)
class Literal:
    value: Any

    def render(self, match) -> Any:
        return self.value


@dataclass(frozen=True)
class Template:
    """`{0}` is the whole match, `{1}`.. are capture groups."""

    value: Union[str, Sequence[str]]

    def render(self, match) -> Any:
        groups = _groups(match)
        if isinstance(self.value, str):
            return self.value.format(*groups)
        return [v.format(*groups) for v in self.value]


@dataclass(frozen=True)
class Computed:
    fn: Callable[[Any], Any]

    def render(self, match) -> Any:
        return self.fn(match)


RuleField = Union[Literal, Template, Computed]


def as_field(value: Any) -> RuleField:
    if isinstance(value, (Literal, Template, Computed)):
        return value
    if callable(value):
        return Computed(value)
    if isinstance(value, str):
        return Template(value)
    return Template(list(value))


@dataclass
class Rule:
    id: str
    pattern: str
    message: RuleField
    suggest: RuleField
    kind: str
    pretty: str
    category: Category
    capture: int = 0
    enabled: bool = True
    ignore_case: bool = True
    multiline: bool = False

    def __post_init__(self):
        self.message = as_field(self.message)
        self.suggest = as_field(self.suggest)
        self.category = Category(self.category)

    def compile(self):
        """Return a fresh matcher for one evaluation pass."""
        flags = re.V0
        if self.ignore_case:
            flags |= re.IGNORECASE
        if self.multiline:
            flags |= re.MULTILINE
        return re.compile(self.pattern, flags)


def _wb(pattern: str) -> str:
    return rf"\b{pattern}\b"


# ---------------------------------------------------------------------
# Shared word lists
# ---------------------------------------------------------------------
VOWEL_NOUNS = (
    "apple|orange|egg|umbrella|hour|idea|elephant|error|example|issue|item|uncle|"
    "onion|answer|option|order|offer|opinion|effort|event|action|article|object|"
    "animal|office|island|image|email|engine|area|agent"
)

A_AN_NOUNS = (
    VOWEL_NOUNS
    + "|accident|adventure|afternoon|agreement|airplane|album|amount|angle|ankle|"
    "appeal|arm|attempt|eye|ear|iron|oven|igloo|ant|inch|oak|owl|arch|alien|angel|"
    "annual|award|enemy|era|icon|import|ivory|oxygen|ocean|olive"
)

COUNTABLE_PLURALS = (
    "people|items|things|problems|issues|errors|mistakes|words|sentences|questions|"
    "answers|steps|days|weeks|months|years|hours|minutes|seconds|times|files|pages|"
    "books|cars|houses|dogs|cats|children|students|employees|users|members|friends|"
    "games|goals|ideas|options|reasons|results|examples|features|changes"
)

AMOUNT_PLURALS = (
    COUNTABLE_PLURALS
    + "|tasks|jobs|projects|attempts|meetings|calls|emails|messages|votes|complaints|"
    "requests|applications|orders|payments|customers|visitors|followers|subscribers|"
    "participants|attendees|candidates|volunteers|witnesses|accidents|incidents|cases|"
    "events|responses|reviews|comments|downloads|uploads|clicks|views|shares|likes"
)

PROGRESSIVE = (
    "going|coming|being|making|doing|getting|having|looking|trying|leaving|running|"
    "playing|working|saying|asking|telling|taking|giving|thinking|waiting|sitting|"
    "standing|walking|talking|eating|sleeping|living|feeling|hoping|acting|moving|"
    "helping|watching|using|showing|starting|stopping"
)

NEGATIVE_AUX = (
    "don'?t|doesn'?t|didn'?t|won'?t|can'?t|couldn'?t|shouldn'?t|wouldn'?t"
)

CLAUSE_VERBS = (
    "am|is|are|was|were|have|has|had|do|does|did|will|would|can|could|should|might|"
    "may|don't|doesn't|didn't|won't|can't|couldn't|shouldn't|went|go|came|know|think|"
    "want|need|like|said|left|stayed|just|look|looked|must|shall"
)

SPLICE_VERBS = (
    "am|is|are|was|were|have|has|had|do|does|did|will|would|can|could|should|might|"
    "may|don't|doesn't|didn't|won't|can't|couldn't|shouldn't|went|go|goes|came|come|"
    "see|saw|know|knew|think|thought|want|wanted|need|needed|like|liked|said|told|"
    "asked|made|took|gave|found|got|let|run|ran|eat|ate|keep|kept|buy|bought|feel|"
    "felt|hear|heard|leave|left|start|started|stop|stopped|stayed|just|look|looked|"
    "must|shall"
)

SINGULAR_NOUNS = (
    "apple|orange|egg|car|house|dog|cat|book|page|file|item|thing|problem|issue|error|"
    "mistake|word|sentence|question|answer|step|day|week|month|year|hour|minute|second|"
    "person|student|employee|user|member|friend|game|goal|idea|option|reason|result|"
    "example|feature|change|task|job|project|attempt|meeting|call|email|message|vote|"
    "complaint|request|application|order|payment|customer|visitor|follower|phone|"
    "computer|table|chair|window|door|box|bag|cup|glass|plate|bottle|piece|picture|"
    "photo|video|song|movie|show|story|article|report|letter|note|test|class|lesson|"
    "rule|law|type|kind|sort|way|point|part|side|line|level|place|country|city|state|"
    "team|group|company|school|room|floor|road|tree|flower|animal|bird|fish|child"
)

QUANTITIES = (
    r"\d{1,}|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|twenty|thirty|"
    "forty|fifty|hundred|thousand|million|billion|several|many|few|multiple|numerous|"
    "various|countless"
)

ADJECTIVES = (
    "bad|good|big|small|large|fast|slow|strong|weak|tall|short|old|young|hard|easy|"
    "long|high|low|hot|cold|rich|poor|smart|bright|dark|light|heavy|thin|thick|wide|"
    "narrow|deep|cheap|expensive|simple|difficult|important|beautiful|ugly|happy|sad|"
    "angry|calm|loud|quiet|clean|dirty|safe|dangerous|useful|quick|nice|kind|cruel|"
    "brave|gentle|rough|smooth|soft|sweet|bitter|sour|clear|sharp|dull|funny|serious|"
    "strange|weird|common|rare|early|late|close|far|near|pretty|plain|real|true|false|"
    "fair|wild|tame|dry|wet|warm|cool|fresh|certain|sure|proud|ashamed|afraid|aware|"
    "glad|sorry|ready|likely|unlikely|similar|different|familiar|comfortable|"
    "uncomfortable"
)

INTRODUCTORY = (
    "However|Therefore|Moreover|Furthermore|Nevertheless|Nonetheless|Meanwhile|"
    "Otherwise|Consequently|Additionally|Unfortunately|Fortunately|Honestly|Clearly|"
    "Obviously|Basically|Actually|Finally|Firstly|Secondly|Lastly|Indeed|Instead|"
    "Likewise|Similarly|Still|Also|Hence|Thus|Yet"
)

REDUNDANT_PAIRS: Dict[str, str] = {
    "end result": "result",
    "free gift": "gift",
    "past history": "history",
    "future plans": "plans",
    "unexpected surprise": "surprise",
    "repeat again": "repeat",
    "revert back": "revert",
    "return back": "return",
    "advance planning": "planning",
    "added bonus": "bonus",
    "basic fundamentals": "fundamentals",
    "close proximity": "proximity",
    "combine together": "combine",
    "completely finished": "finished",
    "consensus of opinion": "consensus",
    "exact same": "same",
    "final outcome": "outcome",
    "first priority": "priority",
    "general public": "public",
    "new innovation": "innovation",
    "null and void": "void",
    "personal opinion": "opinion",
    "reason why": "reason",
    "true fact": "fact",
    "usual custom": "custom",
    "various different": "various",
}

_SUBJECT_CASE = {"me": "I", "him": "he", "her": "she", "them": "they", "i": "I"}

_ANY_FORM = {
    "no": "any",
    "nothing": "anything",
    "nobody": "anybody",
    "nowhere": "anywhere",
    "none": "any",
    "neither": "either",
}


# ---------------------------------------------------------------------
# Suggestion builders that need more than a template
# ---------------------------------------------------------------------
def _article_for(m) -> List[str]:
    article = "an" if m.group(2)[0].lower() in "aeiou" else "a"
    return [f"{m.group(1)} {article} {m.group(2)}", f"{m.group(1)} the {m.group(2)}"]


def _subject_pronouns(m) -> List[str]:
    p1 = _SUBJECT_CASE.get(m.group(1).lower(), m.group(1))
    p2 = _SUBJECT_CASE.get(m.group(2).lower(), m.group(2))
    # "I" goes last by convention
    if p2 == "I":
        return [f"{p1} and I {m.group(3)}"]
    if p1 == "I":
        return [f"{p2} and I {m.group(3)}"]
    return [f"{p1} and {p2} {m.group(3)}"]


def _able_to(m) -> List[str]:
    modal = {"was": "could", "were": "could"}.get(m.group(1).lower(), "can")
    return [modal]


def _ability_to(m) -> List[str]:
    return ["could" if m.group(1).lower() == "had" else "can"]


def _double_negative_3(m) -> List[str]:
    fixed = _ANY_FORM.get(m.group(3).lower(), m.group(3))
    return [f"{m.group(1)} {m.group(2)} {fixed}"]


def _double_negative_2(m) -> List[str]:
    fixed = _ANY_FORM.get(m.group(2).lower(), m.group(2))
    return [f"{m.group(1)} {fixed}"]


def _redundant_pair(m) -> List[str]:
    key = re.sub(r"\s+", " ", m.group(1).lower())
    return [REDUNDANT_PAIRS.get(key, m.group(1))]


def _pluralize(m) -> List[str]:
    count, word = m.group(1), m.group(2)
    lower = word.lower()
    if lower == "child":
        return [f"{count} children"]
    if lower == "person":
        return [f"{count} people"]
    if lower == "fish":
        return [f"{count} fish"]
    if lower.endswith("y") and not re.search(r"[aeiou]y$", lower):
        return [f"{count} {word[:-1]}ies"]
    if lower.endswith(("sh", "ch", "x", "s", "z")):
        return [f"{count} {word}es"]
    return [f"{count} {word}s"]


def _comma_splice(m) -> List[str]:
    subject, verb = m.group(1), m.group(2)
    return [
        f"; {subject} {verb}",
        f". {subject[0].upper() + subject[1:]} {verb}",
        f", and {subject} {verb}",
    ]


def _replace_first(pattern: str, repl: str):
    def build(m) -> List[str]:
        return [re.sub(pattern, repl, m.group(0), count=1, flags=re.IGNORECASE)]

    return build


# ---------------------------------------------------------------------
# Built-in rule table. Earlier rules win overlapping regions.
# ---------------------------------------------------------------------
RULES: List[Rule] = [
    # Missing articles
    Rule(
        id="missing-article-object",
        pattern=_wb(
            r"(eat|buy|get|grab|pick|take|want|need|have|see|find|give)\s+"
            rf"({VOWEL_NOUNS})"
        ),
        message='Consider adding an article: "{1} an {2}" or "{1} a {2}"',
        suggest=_article_for,
        kind="Grammar",
        pretty="Missing Article",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="your-youre",
        pattern=_wb(
            r"your\s+(welcome|right|wrong|correct|done|going|coming|being|making|doing|"
            r"getting|having|looking|leaving|kidding|fired|hired)"
        ),
        message='"Your" is possessive. Did you mean "you\'re" (you are)?',
        suggest=["you're {1}"],
        kind="Grammar",
        pretty="Your / You're",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="their-theyre",
        pattern=_wb(rf"their\s+({PROGRESSIVE})"),
        message='"Their" is possessive. Did you mean "they\'re" (they are)?',
        suggest=["they're {1}"],
        kind="Grammar",
        pretty="Their / They're",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="time-phrase-article-plural",
        pattern=_wb(
            r"(for|in|over|during)\s+(next|last|past|previous|coming|following)\s+"
            r"(few|several|couple|couple of|many|some|\d+)\s+"
            r"(day|week|month|year|hour|minute|second)(?!s)"
        ),
        message='Add "the" and use plural: "{1} the {2} {3} {4}s"',
        suggest=["{1} the {2} {3} {4}s"],
        kind="Grammar",
        pretty="Missing Article & Plural",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="keep-an-eye",
        pattern=_wb(r"keep\s+eye"),
        message='Missing article: "keep an eye"',
        suggest=["keep an eye"],
        kind="Grammar",
        pretty="Missing Article",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="third-person-dont",
        pattern=_wb(r"(he|she|it)\s+don'?t"),
        message='"{1}" requires "doesn\'t" (third person singular).',
        suggest=["{1} doesn't"],
        kind="Agreement",
        pretty="Subject-Verb Agreement",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="object-pronoun-subject",
        pattern=_wb(
            r"(me|him|her|them)\s+and\s+(me|him|her|them|i)\s+"
            r"(went|go|are|were|was|have|had|will|can|could|should|would|did|do|came|come)"
        ),
        message="Use subject pronouns when they are the subject of a sentence.",
        suggest=_subject_pronouns,
        kind="Grammar",
        pretty="Pronoun Case",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="i-were",
        pattern=_wb(r"I\s+were(?!\s+to)"),
        message='Use "I was" (indicative) unless using the subjunctive mood.',
        suggest=["I was"],
        kind="Agreement",
        pretty="Subject-Verb Agreement",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="a-an",
        pattern=_wb(rf"a\s+({A_AN_NOUNS})"),
        message='Use "an" before words starting with a vowel sound: "an {1}"',
        suggest=["an {1}"],
        kind="Grammar",
        pretty="A / An",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="less-fewer",
        pattern=_wb(rf"less\s+({COUNTABLE_PLURALS})"),
        message='Use "fewer" with countable nouns: "fewer {1}"',
        suggest=["fewer {1}"],
        kind="Grammar",
        pretty="Less / Fewer",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="modal-of",
        pattern=_wb(r"(would|must|might|may|will)\s+of"),
        message='"{1} of" should be "{1} have".',
        suggest=["{1} have"],
        kind="Grammar",
        pretty="Modal + Of",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="seen-past",
        pattern=_wb(r"(I|we|they|you|he|she|it)\s+seen"),
        message='"{1} seen" should be "{1} saw" or "{1} have seen"',
        suggest=["{1} saw", "{1} have seen"],
        kind="Grammar",
        pretty="Past Tense",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="plural-has",
        pattern=_wb(r"(I|we|they|you)\s+has"),
        message='"{1}" takes "have", not "has".',
        suggest=["{1} have"],
        kind="Agreement",
        pretty="Subject-Verb Agreement",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="singular-have",
        pattern=_wb(r"(he|she|it)\s+have(?!\s+been)(?!\s+to)"),
        message='"{1}" takes "has", not "have".',
        suggest=["{1} has"],
        kind="Agreement",
        pretty="Subject-Verb Agreement",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="whos-whose",
        pattern=_wb(
            r"who's\s+(car|house|phone|book|name|idea|fault|turn|job|dog|cat|bag|problem|"
            r"decision|opinion|responsibility)"
        ),
        message='"Who\'s" means "who is". Use "whose" for possession: "whose {1}"',
        suggest=["whose {1}"],
        kind="Grammar",
        pretty="Who's / Whose",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="affect-effect",
        pattern=_wb(
            r"(the|an?|this|that|its|no|any|every|some|each|positive|negative|side|main|"
            r"overall|long-term|short-term)\s+affect"
        ),
        message='"Affect" is usually a verb. Did you mean "effect" (noun)?',
        suggest=["{1} effect"],
        kind="WordChoice",
        pretty="Affect / Effect",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="then-than",
        pattern=_wb(
            r"(better|worse|more|less|greater|fewer|larger|smaller|bigger|taller|shorter|"
            r"faster|slower|older|younger|higher|lower|nicer|easier|harder|longer|stronger|"
            r"weaker|richer|poorer|smarter|brighter|darker)\s+then"
        ),
        message='Use "than" for comparisons, not "then".',
        suggest=["{1} than"],
        kind="Grammar",
        pretty="Then / Than",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="loose-lose",
        pattern=_wb(
            r"(will|going to|don'?t|didn'?t|can'?t|won'?t|might|could|would|should|to|not)"
            r"\s+loose"
        ),
        message='"Loose" means not tight. Did you mean "lose"?',
        suggest=["{1} lose"],
        kind="Spelling",
        pretty="Lose / Loose",
        category=Category.SPELLING,
    ),
    Rule(
        id="supposably",
        pattern=_wb("supposably"),
        message='Did you mean "supposedly"?',
        suggest=["supposedly"],
        kind="Spelling",
        pretty="Spelling",
        category=Category.SPELLING,
    ),
    Rule(
        id="irregardless",
        pattern=_wb("irregardless"),
        message='"Irregardless" is non-standard. Use "regardless".',
        suggest=["regardless"],
        kind="Grammar",
        pretty="Non-standard Word",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="could-care-less",
        pattern=_wb(r"could\s+care\s+less"),
        message='The idiom is "couldn\'t care less" (meaning you already care the minimum).',
        suggest=["couldn't care less"],
        kind="Grammar",
        pretty="Idiom",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="capitalize-i",
        pattern=r"(?:^|[.!?]\s+)(i)\s",
        capture=1,
        ignore_case=False,
        multiline=True,
        message='The pronoun "I" should always be capitalized.',
        suggest=["I"],
        kind="Capitalization",
        pretty="Capitalize I",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="missing-end-punctuation",
        pattern=r"[a-zA-Z]{2,}$",
        multiline=True,
        enabled=False,  # too noisy
        message="Sentence may be missing ending punctuation.",
        suggest=["{0}."],
        kind="Style",
        pretty="Missing Punctuation",
        category=Category.STYLE,
    ),
    # Rephrasing and wordiness
    Rule(
        id="as-as-comparison",
        pattern=_wb(
            r"(be|is|are|was|were|been|being|seem|seems|seemed|look|looks|looked|feel|"
            r"feels|felt|sound|sounds|sounded|become|becomes|became|get|gets|got|remain|"
            rf"remains|remained)\s+({ADJECTIVES})\s+as"
        ),
        message='Use "as {2} as" for comparisons (correlative "as...as").',
        suggest=["{1} as {2} as"],
        kind="Grammar",
        pretty="Rephrase",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="in-order-to",
        pattern=_wb(r"in\s+order\s+to"),
        message='"In order to" can be simplified to "to".',
        suggest=["to"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="at-this-point-in-time",
        pattern=_wb(r"at\s+this\s+point\s+in\s+time"),
        message='"At this point in time" can be simplified.',
        suggest=["now", "currently"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="due-to-the-fact-that",
        pattern=_wb(r"due\s+to\s+the\s+fact\s+that"),
        message='"Due to the fact that" can be simplified to "because".',
        suggest=["because"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="in-spite-of-the-fact-that",
        pattern=_wb(r"in\s+spite\s+of\s+the\s+fact\s+that"),
        message='"In spite of the fact that" can be simplified.',
        suggest=["although", "despite"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="on-a-basis",
        pattern=_wb(
            r"on\s+a\s+(daily|weekly|monthly|yearly|regular|frequent|constant)\s+basis"
        ),
        message='"On a {1} basis" can be simplified to "{1}".',
        suggest=["{1}"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="reason-is-because",
        pattern=_wb(r"the\s+reason\s+(is|was)\s+because"),
        message='"The reason is because" is redundant. Use "the reason is that" or just "because".',
        suggest=["the reason {1} that", "because"],
        kind="Style",
        pretty="Redundant",
        category=Category.STYLE,
    ),
    Rule(
        id="each-and-every",
        pattern=_wb(r"each\s+and\s+every"),
        message='"Each and every" is redundant. Use "each" or "every".',
        suggest=["each", "every"],
        kind="Style",
        pretty="Redundant",
        category=Category.STYLE,
    ),
    Rule(
        id="first-and-foremost",
        pattern=_wb(r"first\s+and\s+foremost"),
        message='"First and foremost" can be simplified to "first".',
        suggest=["first"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="a-lot-of",
        pattern=_wb(
            r"a\s+lot\s+of\s+(people|things|problems|issues|errors|mistakes|words|questions|"
            r"ideas|options|reasons|ways|times|places|books|files|items|changes|features|"
            r"users|students|employees|members|friends|tasks)"
        ),
        message='"A lot of {1}" can be tightened to "many {1}".',
        suggest=["many {1}"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="able-to",
        pattern=_wb(r"(is|are|was|were|am)\s+able\s+to"),
        message='"{1} able to" can be simplified.',
        suggest=_able_to,
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="make-a-decision",
        pattern=_wb(r"make\s+a\s+decision"),
        message='"Make a decision" can be simplified to "decide".',
        suggest=["decide"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="give-consideration-to",
        pattern=_wb(r"give\s+consideration\s+to"),
        message='"Give consideration to" can be simplified to "consider".',
        suggest=["consider"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="take-into-consideration",
        pattern=_wb(r"take\s+into\s+consideration"),
        message='"Take into consideration" can be simplified to "consider".',
        suggest=["consider"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="has-the-ability-to",
        pattern=_wb(r"(has|have|had)\s+the\s+ability\s+to"),
        message='"Has the ability to" can be simplified.',
        suggest=_ability_to,
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="whether-or-not",
        pattern=_wb(r"whether\s+or\s+not"),
        message='"Or not" is usually redundant after "whether".',
        suggest=["whether"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="at-the-present-time",
        pattern=_wb(r"at\s+the\s+present\s+time"),
        message='"At the present time" can be simplified.',
        suggest=["now", "currently"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    Rule(
        id="filler-important-to-note",
        pattern=_wb(
            r"it\s+is\s+(important|worth noting|interesting|notable|significant)\s+to\s+"
            r"note\s+that"
        ),
        message="This filler phrase can usually be removed for directness.",
        suggest=Literal([""]),
        kind="Style",
        pretty="Filler",
        category=Category.STYLE,
    ),
    Rule(
        id="as-a-matter-of-fact",
        pattern=_wb(r"as\s+a\s+matter\s+of\s+fact"),
        message='"As a matter of fact" can be shortened.',
        suggest=["in fact"],
        kind="Style",
        pretty="Wordy",
        category=Category.STYLE,
    ),
    # Lay / lie, rise / raise
    Rule(
        id="lay-down",
        pattern=_wb(
            r"(going\s+to|gonna|to|will|should|could|would|can|may|might|must|please)"
            r"\s+lay\s+down"
        ),
        message='"Lay" requires a direct object. Use "lie down" (to recline).',
        suggest=["{1} lie down"],
        kind="Grammar",
        pretty="Lay / Lie",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="laid-down",
        pattern=_wb(r"(I|he|she|we|they|you|it)\s+laid\s+down"),
        message='Past tense of "lie down" is "lay down", not "laid down".',
        suggest=["{1} lay down"],
        kind="Grammar",
        pretty="Lay / Lie",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="rises-raises",
        pattern=_wb(
            r"(sun|moon|temperature|prices?|costs?|levels?|tide|water|smoke|steam|dough|"
            r"bread)\s+raises"
        ),
        message='"Raise" requires a direct object. Use "rises" (to go up on its own).',
        suggest=["{1} rises"],
        kind="Grammar",
        pretty="Rise / Raise",
        category=Category.GRAMMAR,
    ),
    # Pronoun case
    Rule(
        id="reflexive-myself-object",
        pattern=_wb(
            r"(contact|email|call|tell|ask|invite|join|help|between|with|for|to|from)\s+"
            r"(\w+\s+(?:or|and)\s+)?myself"
        ),
        message='"Myself" is reflexive. Use "me" unless referring back to the subject "I".',
        suggest=_replace_first(r"myself\b", "me"),
        kind="Grammar",
        pretty="Pronoun",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="reflexive-myself-subject",
        pattern=_wb(
            r"myself\s+and\s+(\w+)\s+(will|shall|would|can|could|should|must|have|had|am|"
            r"are|was|were|went|go)"
        ),
        message='Use "I" instead of "myself" as a subject.',
        suggest=["I and {1} {2}", "{1} and I {2}"],
        kind="Grammar",
        pretty="Pronoun",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="between-you-and-i",
        pattern=_wb(
            r"(between|for|with|to|from|about|against|without)\s+(you|him|her|them|us)\s+"
            r"and\s+I"
        ),
        message='After prepositions, use "me" not "I": "{1} {2} and me".',
        suggest=["{1} {2} and me"],
        kind="Grammar",
        pretty="Pronoun Case",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="between-i-and-you",
        pattern=_wb(
            r"(between|for|with|to|from|about|against|without)\s+I\s+and\s+"
            r"(you|him|her|them|us|\w+)"
        ),
        message='After prepositions, use "me" not "I".',
        suggest=["{1} me and {2}", "{1} {2} and me"],
        kind="Grammar",
        pretty="Pronoun Case",
        category=Category.GRAMMAR,
    ),
    # Good / well, bad / badly
    Rule(
        id="did-good",
        pattern=_wb(r"(did|does|do|doing|done|performed?|played?|worked?)\s+good"),
        message='"Good" is an adjective. Use "well" (adverb) to modify a verb.',
        suggest=["{1} well"],
        kind="Grammar",
        pretty="Good / Well",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="feel-badly",
        pattern=_wb(
            r"(feel|feels|felt|look|looks|looked|taste|tastes|tasted|smell|smells|smelled|"
            r"sound|sounds|sounded|seem|seems|seemed)\s+badly"
        ),
        message='"{1}" is a linking verb. Use the adjective "bad", not the adverb "badly".',
        suggest=["{1} bad"],
        kind="Grammar",
        pretty="Bad / Badly",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="tastes-well",
        pattern=_wb(
            r"(taste|tastes|tasted|smell|smells|smelled|look|looks|looked)\s+well"
        ),
        message='"{1}" is a linking verb here. Use the adjective "good", not the adverb "well".',
        suggest=["{1} good"],
        kind="Grammar",
        pretty="Good / Well",
        category=Category.GRAMMAR,
    ),
    # Everyday / every day
    Rule(
        id="everyday-adverb",
        pattern=(
            r"\b(go|went|come|came|eat|ate|run|ran|walk|walked|do|did|happen|happened|use|"
            r"used|see|saw|visit|visited|work|worked|exercise|exercised|practice|practiced|"
            r"play|played|train|trained|study|studied|happens|occur|occurs)\s+"
            r"(?:there\s+|here\s+)?everyday\b"
        ),
        message=(
            '"Everyday" is an adjective (everyday life). As an adverb meaning '
            '"each day", use two words: "every day".'
        ),
        suggest=_replace_first(r"everyday\b", "every day"),
        kind="Grammar",
        pretty="Every Day",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="every-day-adjective",
        pattern=_wb(
            r"(an?|the|this|that|my|your|his|her|its|our|their)\s+every\s+day\s+"
            r"(occurrence|activity|thing|task|routine|event|item|object|phenomenon|word|"
            r"phrase|use|life|language|experience|problem|issue|struggle|reality|situation)"
        ),
        message='When used as an adjective before a noun, write "everyday" as one word.',
        suggest=["{1} everyday {2}"],
        kind="Grammar",
        pretty="Everyday",
        category=Category.GRAMMAR,
    ),
    # Double negatives
    Rule(
        id="double-negative-verb",
        pattern=_wb(
            rf"({NEGATIVE_AUX}|isn'?t|aren'?t|wasn'?t|weren'?t|haven'?t|hasn'?t|hadn'?t)\s+"
            r"(need|want|have|get|see|hear|go|do|make|give|take|find|know|think)\s+"
            r"(no|nothing|nobody|nowhere|none|neither)"
        ),
        message='Double negative. Use "any/anything/anybody/anywhere" instead.',
        suggest=_double_negative_3,
        kind="Grammar",
        pretty="Double Negative",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="double-negative",
        pattern=_wb(rf"({NEGATIVE_AUX})\s+(no|nothing|nobody|nowhere|none)"),
        message='Double negative. Use "any/anything/anybody" instead.',
        suggest=_double_negative_2,
        kind="Grammar",
        pretty="Double Negative",
        category=Category.GRAMMAR,
    ),
    # Amount / number, borrow / lend
    Rule(
        id="amount-number",
        pattern=_wb(rf"(the\s+)?amount\s+of\s+({AMOUNT_PLURALS})"),
        message='Use "number" for countable nouns: "number of {2}".',
        suggest=_replace_first("amount", "number"),
        kind="Grammar",
        pretty="Amount / Number",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="borrow-lend",
        pattern=_wb(
            r"(can|could|will|would|please)\s+(?:you\s+)?borrow\s+(me|him|her|us|them)"
        ),
        message='"Borrow" means to receive. Use "lend" (to give temporarily).',
        suggest=["{1} lend {2}"],
        kind="Grammar",
        pretty="Borrow / Lend",
        category=Category.GRAMMAR,
    ),
    # Redundancy
    Rule(
        id="absolute-unique",
        pattern=_wb(
            r"((?:very|completely|totally|most|absolutely|really|quite|somewhat|rather)"
            r"\s+unique)"
        ),
        message=(
            '"Unique" is absolute and cannot be modified by degree. '
            "Something is either unique or it isn't."
        ),
        suggest=["unique"],
        kind="Style",
        pretty="Redundant",
        category=Category.STYLE,
    ),
    Rule(
        id="redundant-pair",
        pattern=_wb(
            "("
            + "|".join(k.replace(" ", r"\s+") for k in REDUNDANT_PAIRS)
            + ")"
        ),
        message='"{1}" is redundant.',
        suggest=_redundant_pair,
        kind="Style",
        pretty="Redundant",
        category=Category.STYLE,
    ),
    Rule(
        id="try-and",
        pattern=_wb(r"(try|be\s+sure)\s+and\s+(\w+)"),
        message='"{1} and" is informal. Use "{1} to" in formal writing.',
        suggest=["{1} to {2}"],
        kind="Style",
        pretty="Informal",
        category=Category.STYLE,
    ),
    Rule(
        id="subordinate-fragment",
        pattern=(
            r"(?:^|[.!?]\s+)(Because|Although|Though|Unless|Until|While|When|Since|If|"
            r"Whereas|Wherever|Whenever|Before|After)\s+[^.!?]{5,}\.(?:\s+[A-Z]|$)"
        ),
        ignore_case=False,
        multiline=True,
        enabled=False,  # false positives on ordinary subordinate clauses
        message=(
            'This looks like a sentence fragment starting with "{1}". '
            "Consider attaching it to the previous or next sentence."
        ),
        suggest=Literal([]),
        kind="Grammar",
        pretty="Fragment",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="who-that-people",
        pattern=_wb(
            r"(person|people|man|woman|boy|girl|child|children|student|students|teacher|"
            r"teachers|doctor|doctors|friend|friends|employee|employees|worker|workers|"
            r"player|players|member|members|anyone|someone|everyone|nobody|somebody|anybody|"
            r"everybody)\s+that\s+(is|are|was|were|has|have|had|will|would|can|could|should|"
            r"might|may|does|did|do)"
        ),
        message='Prefer "who" instead of "that" when referring to people.',
        suggest=["{1} who {2}"],
        kind="Style",
        pretty="Who / That",
        category=Category.STYLE,
    ),
    Rule(
        id="different-than",
        pattern=_wb(r"different\s+than"),
        message='In formal writing, "different from" is preferred over "different than".',
        suggest=["different from"],
        kind="Style",
        pretty="Word Choice",
        category=Category.STYLE,
    ),
    Rule(
        id="plural-after-number",
        pattern=_wb(rf"({QUANTITIES})\s+({SINGULAR_NOUNS})(?!s|es|'s)"),
        message='"{1} {2}" needs the plural form.',
        suggest=_pluralize,
        kind="Grammar",
        pretty="Plural",
        category=Category.GRAMMAR,
    ),
    # Punctuation
    Rule(
        id="run-on-naive",
        pattern=rf"(?<![\w'])([a-z]+)\s+({SUBJECTS})\s+({FINITE_VERBS})\b",
        enabled=False,  # flags relative clauses; superseded by ClauseBoundaryDetector
        message="Possible run-on sentence. Add punctuation between the clauses.",
        suggest=["{1}, {2} {3}", "{1}; {2} {3}"],
        kind="Punctuation",
        pretty="Run-on Sentence",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="comma-after-introductory",
        pattern=rf"(?:^|[.!?]\s+)({INTRODUCTORY})\s+([a-z])",
        capture=1,
        multiline=True,
        message='Add a comma after "{1}" when it starts a clause.',
        suggest=["{1},"],
        kind="Punctuation",
        pretty="Missing Comma",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="comma-before-but",
        pattern=(
            r"([a-z]+)\s+(but)\s+(I|he|she|it|we|they|you|this|that|there)\s+"
            rf"({CLAUSE_VERBS}|isn't|aren't|wasn't|weren't|forgot)\b"
        ),
        message='Add a comma before "but" when it joins two independent clauses.',
        suggest=["{1}, but {3} {4}"],
        kind="Punctuation",
        pretty="Missing Comma",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="comma-before-and",
        pattern=rf"([a-z]+)\s+(and)\s+(I|he|she|we|they|you)\s+({CLAUSE_VERBS})\b",
        message='Consider a comma before "and" when it joins two independent clauses.',
        suggest=["{1}, and {3} {4}"],
        kind="Punctuation",
        pretty="Missing Comma",
        category=Category.STYLE,
    ),
    Rule(
        id="comma-before-so",
        pattern=(
            r"([a-z]+)\s+(so)\s+(I|he|she|it|we|they|you|this|that|there)\s+"
            rf"({CLAUSE_VERBS})\b"
        ),
        message='Add a comma before "so" when it joins two independent clauses.',
        suggest=["{1}, so {3} {4}"],
        kind="Punctuation",
        pretty="Missing Comma",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="comma-before-or",
        pattern=(
            r"([a-z]+)\s+(or)\s+(I|he|she|it|we|they|you|this|that|there)\s+"
            rf"({CLAUSE_VERBS})\b"
        ),
        message='Add a comma before "or" when it joins two independent clauses.',
        suggest=["{1}, or {3} {4}"],
        kind="Punctuation",
        pretty="Missing Comma",
        category=Category.GRAMMAR,
    ),
    Rule(
        id="comma-splice",
        pattern=rf",\s+(I|he|she|it|we|they|you)\s+({SPLICE_VERBS})\b",
        message="Possible comma splice. Consider using a semicolon, period, or adding a conjunction.",
        suggest=_comma_splice,
        kind="Punctuation",
        pretty="Comma Splice",
        category=Category.GRAMMAR,
    ),
]


# ---------------------------------------------------------------------
# Externally supplied rules (YAML descriptors)
# ---------------------------------------------------------------------
_REQUIRED_KEYS = ("id", "pattern", "message", "kind")


def build_rule(entry: Dict[str, Any]) -> Rule:
    rule_id = str(entry.get("id", "<unnamed>"))
    missing = [k for k in _REQUIRED_KEYS if k not in entry]
    if missing:
        raise MalformedRule(rule_id, f"missing keys: {', '.join(missing)}")

    suggest = entry.get("suggest", [])
    if isinstance(suggest, str):
        suggest = [suggest]

    try:
        rule = Rule(
            id=rule_id,
            pattern=str(entry["pattern"]),
            message=Template(str(entry["message"])),
            suggest=Template([str(s) for s in suggest]),
            kind=str(entry["kind"]),
            pretty=str(entry.get("pretty", entry["kind"])),
            category=entry.get("category", "grammar"),
            capture=int(entry.get("capture", 0)),
            enabled=bool(entry.get("enabled", True)),
            ignore_case=bool(entry.get("ignore_case", True)),
        )
        rule.compile()
    except (ValueError, TypeError, re.error) as exc:
        raise MalformedRule(rule_id, exc) from exc
    return rule


def load_custom_rules(entries: Iterable[Dict[str, Any]]) -> List[Rule]:
    rules: List[Rule] = []
    for entry in entries or ():
        try:
            rules.append(build_rule(entry))
        except MalformedRule as exc:
            logger.warning("Skipping custom rule: %s", exc)
    return rules


def rule_table(settings=None) -> List[Rule]:
    """Built-in rules followed by custom ones, with `rules.disabled` ids switched off."""
    if settings is None:
        return list(RULES)
    off = set(settings.disabled_rules)
    table: List[Rule] = []
    for rule in list(RULES) + load_custom_rules(settings.custom_rules):
        if rule.id in off and rule.enabled:
            rule = replace(rule, enabled=False)
        table.append(rule)
    return table
