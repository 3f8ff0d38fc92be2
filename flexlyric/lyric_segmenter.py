# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Word Segmenter - splits a lyric line into highlight units
#
# This file is part of FlexLyric
#
# SCRIPTS:
#   cjk:   one unit per code point (ideographs, kana, hangul present anywhere)
#   latin: whitespace-separated tokens, a single space synthesized between them

import re

SCRIPT_CJK = "cjk"
SCRIPT_LATIN = "latin"

# CJK Unified Ideographs, Hiragana, Katakana, Hangul Syllables
CJK_PATTERN = re.compile("[\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ff\uac00-\ud7af]")


def classify(text):
    """Return SCRIPT_CJK if text holds any CJK code point, else SCRIPT_LATIN."""
    if text and CJK_PATTERN.search(text):
        return SCRIPT_CJK
    return SCRIPT_LATIN


def _split_cjk(text):
    # str iterates by code point, astral characters stay whole
    return list(text)


def _split_latin(text):
    return text.split()


_SPLITTERS = {
    SCRIPT_CJK: _split_cjk,
    SCRIPT_LATIN: _split_latin,
}


def split_words(text):
    """Classify and segment text.

    :param text: lyric line
    :return: (script, units) tuple
    """
    if not text:
        return SCRIPT_LATIN, []
    script = classify(text)
    return script, _SPLITTERS[script](text)


def segment(text):
    """Split text into highlight units."""
    return split_words(text)[1]


def joiner(script):
    """Separator drawn between adjacent units of the given script."""
    return "" if script == SCRIPT_CJK else " "
