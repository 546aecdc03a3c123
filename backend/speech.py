"""SSML rendering of engine directives for the voice skill.

    Say            <p>text</p>
    Delay          <break time="1500ms"/>
    Play           <audio src="{sound_files_url}{sound id}"/>
    NotUnderstood  <p>Sorry, I don't know what that means.</p>
    Bye            <p>Good bye.</p>
    Finished       (nothing)
"""

import xml.etree.ElementTree as ET

from adventurebot.responses import Response, dispatch

NOT_UNDERSTOOD_TEXT = "Sorry, I don't know what that means."
BYE_TEXT = "Good bye."


class SsmlBuilder:
    """ResponseHandler that accumulates a <speak> document."""

    def __init__(self, sound_files_url: str = "") -> None:
        self._sound_files_url = sound_files_url
        self.root = ET.Element("speak")
        self.ended = False

    def _paragraph(self, text: str) -> None:
        ET.SubElement(self.root, "p").text = text

    def say(self, text: str) -> None:
        self._paragraph(text)

    def delay(self, seconds: float) -> None:
        ET.SubElement(self.root, "break", time=f"{int(seconds * 1000)}ms")

    def play(self, sound_id: str) -> None:
        ET.SubElement(self.root, "audio", src=self._sound_files_url + sound_id)

    def not_understood(self) -> None:
        self._paragraph(NOT_UNDERSTOOD_TEXT)

    def bye(self) -> None:
        self._paragraph(BYE_TEXT)
        self.ended = True

    def finished(self) -> None:
        pass

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding="unicode", short_empty_elements=True)


def to_ssml(response: Response, sound_files_url: str = "") -> str:
    builder = SsmlBuilder(sound_files_url)
    dispatch(response, builder)
    return builder.to_string()
