"""Test case step markup.

Steps are written one per line as ``N. action|expected result``. The ordinal and the
expected result are optional::

    1. Open the login page|Login form is shown
    2. Submit valid credentials
"""

import re
from dataclasses import dataclass
from typing import List
from xml.sax.saxutils import escape


DEFAULT_EXPECTED_RESULT = 'Verify step completes successfully'

_ORDINAL = re.compile(r'^(\d+)\.\s*(.+)$')
_XML_ENTITIES = {"'": '&apos;', '"': '&quot;'}


@dataclass(frozen=True)
class TestStep:
    """One action step and its expected result."""

    action: str
    expected: str = DEFAULT_EXPECTED_RESULT


def parse_steps(text: str) -> List[TestStep]:
    """Parse step markup into steps, skipping blank lines."""
    steps = []
    for line in text.split('\n'):
        if not line.strip():
            continue
        action, _, expected = line.partition('|')
        action = action.strip()
        expected = expected.strip()
        match = _ORDINAL.match(action)
        if match:
            action = match.group(2)
        steps.append(TestStep(action=action, expected=expected or DEFAULT_EXPECTED_RESULT))
    return steps


def _parameterized(text: str) -> str:
    return f'<parameterizedString isformatted="true">{escape(text, _XML_ENTITIES)}</parameterizedString>'


def steps_to_xml(steps: List[TestStep]) -> str:
    """Render steps as the XML stored in the ``Microsoft.VSTS.TCM.Steps`` field."""
    parts = [f'<steps id="0" last="{len(steps)}">']
    for index, step in enumerate(steps, start=1):
        parts.append(
            f'<step id="{index}" type="ActionStep">'
            f'{_parameterized(step.action)}{_parameterized(step.expected)}'
            '</step>'
        )
    parts.append('</steps>')
    return ''.join(parts)


def convert_steps_to_xml(text: str) -> str:
    return steps_to_xml(parse_steps(text))
