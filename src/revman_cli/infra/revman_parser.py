"""ElementTree backed implementation of :class:`~revman_cli.core.protocols.DocumentParser`.

Reads a RevMan 5 (``.rm5``) export into a plain nested mapping.  Only the
structure the renderers need is normalised; every XML attribute is kept
under its lower-cased name so the JSON dump shows the full data.

Shape of the result::

    {
        "<root attribute>": ...,
        "title": str,
        "included_studies": [{"id": ..., "name": ..., "year": ...}, ...],
        "analyses_and_data": {
            "comparison": [
                {
                    "id": ..., "no": ..., "name": str,
                    "outcome": [
                        {
                            "outcome_type": "dichotomous" | ...,
                            "name": str,
                            "study": [{"study_id": ..., ...}, ...],
                            "subgroup": [{"no": ..., "name": str, "study": [...]}, ...],
                        },
                    ],
                },
            ],
        },
    }

All ElementTree exceptions are caught here and re-raised as
:class:`~revman_cli.exceptions.DocumentParseError`.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Any

from revman_cli.core.models import ParseOptions, ParseResult
from revman_cli.core.tree import child_label, outcome_label
from revman_cli.exceptions import DocumentParseError
from revman_cli.utils.log import get_logger

logger = get_logger(__name__)

ROOT_TAG: str = "COCHRANE_REVIEW"

OUTCOME_TYPES: dict[str, str] = {
    "DICH": "dichotomous",
    "CONT": "continuous",
    "IV": "inverse_variance",
    "OTHER": "other",
    "IPD": "individual_patient_data",
}
"""Outcome element prefix → ``outcome_type`` value."""

_OUTCOME_TEXT_FIELDS: tuple[str, ...] = (
    "GROUP_LABEL_1",
    "GROUP_LABEL_2",
    "GRAPH_LABEL_1",
    "GRAPH_LABEL_2",
)

_INT_RE = re.compile(r"-?(?:0|[1-9]\d*)")
_FLOAT_RE = re.compile(r"-?\d+\.\d+(?:[eE][-+]?\d+)?|-?\d+[eE][-+]?\d+")


# ---------------------------------------------------------------------------
# Element helpers (pure)
# ---------------------------------------------------------------------------

def coerce_value(value: str) -> Any:
    """Convert an XML attribute string to a bool, int or float if it is one.

    Integers with leading zeros (``"0001"``) stay strings so identifiers
    keep their formatting.
    """
    if value == "YES":
        return True
    if value == "NO":
        return False
    if _INT_RE.fullmatch(value):
        return int(value)
    if _FLOAT_RE.fullmatch(value):
        return float(value)
    return value


def _attributes(element: ET.Element) -> dict[str, Any]:
    return {key.lower(): coerce_value(value) for key, value in element.attrib.items()}


def _text(element: ET.Element | None) -> str:
    """Return the whitespace-normalised text content of *element*."""
    if element is None:
        return ""
    return " ".join("".join(element.itertext()).split())


def _has_study_data(outcome: dict[str, Any]) -> bool:
    if outcome["study"]:
        return True
    return any(subgroup["study"] for subgroup in outcome["subgroup"])


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class RevManXmlParser:
    """Concrete :class:`DocumentParser` for RevMan 5 XML.

    Usage::

        parser = RevManXmlParser()
        result = parser.parse(raw_text, ParseOptions(debug_outcomes=True))

    This class satisfies the :class:`~revman_cli.core.protocols.DocumentParser`
    protocol structurally; no explicit inheritance required.
    """

    def parse(self, raw_text: str, options: ParseOptions) -> ParseResult:
        """Parse *raw_text* into a document and its warnings.

        Raises
        ------
        DocumentParseError
            If *raw_text* is not XML or is not a RevMan review.
        """
        root = self._load(raw_text)
        warnings: list[str] = []

        document: dict[str, Any] = _attributes(root)
        document["title"] = _text(root.find("COVER_SHEET/TITLE"))
        document["included_studies"] = [
            _attributes(study)
            for study in root.iterfind(
                "STUDIES_AND_REFERENCES/STUDIES/INCLUDED_STUDIES/STUDY"
            )
        ]
        known_studies = {
            study["id"] for study in document["included_studies"] if "id" in study
        }

        analyses = root.find("ANALYSES_AND_DATA")
        if analyses is None:
            warnings.append("Document has no ANALYSES_AND_DATA section")
            document["analyses_and_data"] = {"comparison": []}
        else:
            section = _attributes(analyses)
            section["comparison"] = [
                self._parse_comparison(
                    element,
                    index,
                    options=options,
                    known_studies=known_studies,
                    warnings=warnings,
                )
                for index, element in enumerate(analyses.iterfind("COMPARISON"))
            ]
            document["analyses_and_data"] = section

        logger.debug(
            "Parsed %d comparison(s) from %s document",
            len(document["analyses_and_data"]["comparison"]),
            ROOT_TAG,
        )
        return ParseResult(document=document, warnings=tuple(warnings))

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @staticmethod
    def _load(raw_text: str) -> ET.Element:
        if not raw_text.strip():
            raise DocumentParseError("RevMan file is empty")
        try:
            root = ET.fromstring(raw_text)
        except ET.ParseError as exc:
            raise DocumentParseError(f"Invalid XML: {exc}") from exc

        if root.tag != ROOT_TAG:
            raise DocumentParseError(
                f"Not a RevMan file: expected <{ROOT_TAG}> root element, "
                f"found <{root.tag}>",
            )
        return root

    # ------------------------------------------------------------------
    # Analyses and data
    # ------------------------------------------------------------------

    def _parse_comparison(
        self,
        element: ET.Element,
        index: int,
        *,
        options: ParseOptions,
        known_studies: set[Any],
        warnings: list[str],
    ) -> dict[str, Any]:
        comparison = _attributes(element)
        comparison["name"] = _text(element.find("NAME"))
        number = index + 1
        if not comparison["name"]:
            warnings.append(f"Comparison {number} has no name")

        outcomes: list[dict[str, Any]] = []
        for child in element:
            prefix, _, suffix = child.tag.partition("_")
            if suffix != "OUTCOME" or prefix not in OUTCOME_TYPES:
                continue
            label = outcome_label(index, len(outcomes))
            outcomes.append(
                self._parse_outcome(
                    child,
                    prefix,
                    label,
                    position=len(outcomes) + 1,
                    options=options,
                    known_studies=known_studies,
                    warnings=warnings,
                )
            )

        if options.debug_outcomes and not outcomes:
            warnings.append(f'Comparison {number} "{comparison["name"]}" has no outcomes')

        if options.remove_empty_outcomes:
            outcomes = [outcome for outcome in outcomes if _has_study_data(outcome)]

        comparison["outcome"] = outcomes
        return comparison

    def _parse_outcome(
        self,
        element: ET.Element,
        prefix: str,
        label: str,
        *,
        position: int,
        options: ParseOptions,
        known_studies: set[Any],
        warnings: list[str],
    ) -> dict[str, Any]:
        outcome = _attributes(element)
        outcome["outcome_type"] = OUTCOME_TYPES[prefix]
        outcome["name"] = _text(element.find("NAME"))
        for tag in _OUTCOME_TEXT_FIELDS:
            child = element.find(tag)
            if child is not None:
                outcome[tag.lower()] = _text(child)

        outcome["study"] = [_attributes(data) for data in element.iterfind(f"{prefix}_DATA")]
        outcome["subgroup"] = []
        for subgroup_element in element.iterfind(f"{prefix}_SUBGROUP"):
            subgroup = _attributes(subgroup_element)
            subgroup["name"] = _text(subgroup_element.find("NAME"))
            subgroup["study"] = [
                _attributes(data) for data in subgroup_element.iterfind(f"{prefix}_DATA")
            ]
            outcome["subgroup"].append(subgroup)

        if not outcome["name"]:
            warnings.append(f"Outcome {label} has no name")

        if options.debug_outcomes:
            self._scan_outcome(outcome, label, position, known_studies, warnings)

        return outcome

    @staticmethod
    def _scan_outcome(
        outcome: dict[str, Any],
        label: str,
        position: int,
        known_studies: set[Any],
        warnings: list[str],
    ) -> None:
        """Append detailed structural warnings for one outcome."""
        name = outcome["name"]
        declared = outcome.get("no")
        if isinstance(declared, int) and declared != position:
            warnings.append(
                f'Outcome {label} "{name}" declares number {declared} '
                f"but appears at position {position}"
            )

        if not outcome["subgroup"] and not outcome["study"]:
            warnings.append(f'Outcome {label} "{name}" has no study data')

        for subgroup in outcome["subgroup"]:
            if not subgroup["study"]:
                warnings.append(
                    f'Subgroup {child_label(label, subgroup.get("no", ""))} '
                    f'"{subgroup["name"]}" has no study data'
                )

        if not known_studies:
            return

        studies = list(outcome["study"])
        for subgroup in outcome["subgroup"]:
            studies.extend(subgroup["study"])
        for study in studies:
            study_id = study.get("study_id")
            if study_id not in known_studies:
                warnings.append(
                    f'Outcome {label} "{name}" references unknown study {study_id}'
                )
