"""Keyboard interactions"""


def type_humanized(element, value, pacing):
    """Clear a field and type the value one character at a time"""
    element.click()
    pacing.after_click()
    element.fill("")
    for char in value:
        element.press_sequentially(char)
        pacing.keystroke()
