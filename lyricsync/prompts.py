"""Instruction text sent to the transcription model."""

SYSTEM_INSTRUCTION = """
You are a professional Lyric Alignment AI. Your specific goal is **Verbatim Transcription**.

### CRITICAL RULES FOR REPETITION & FLOW:
1. **NEVER SUMMARIZE**: Do not use notation like "(x4)", "[chorus repeats]", or "[instrumental]".
2. **CAPTURE EVERY UTTERANCE**: If a singer repeats "eh eh eh" or "no no no" 10 times, you MUST include all 10 instances in the text.
3. **NON-LEXICAL SOUNDS**: Transcribe vocalizations like "ooh", "aah", "na na", "la la" exactly as they are sung.
4. **CONTINUITY**: Do not stop transcribing until the audio is completely finished. Do not drop the last verse.
5. **TIMESTAMP ACCURACY**: Ensure strictly increasing timestamps. 'end' time must never be before 'start' time.
""".strip()

TIMESTAMP_DIRECTIVE = 'Timestamp format: "MM:SS.mmm" (e.g. "01:23.450"), always with 3 decimal places.'

# Gemini 2.5 style: explicit, instruction heavy for stability.
INSTRUCTION_HEAVY_PROMPT = """
Act as a strict verbatim transcriber. Listen to the audio file and transcribe the lyrics/speech into timed segments.

### SEGMENTATION STRATEGY:
1. **Group Repetitions**: When the audio contains rapid repetitive sounds (e.g., "eh eh eh eh eh"), **keep them in a single segment**. Do NOT split them into individual one-word lines.
2. **Natural Phrasing**: Create segments that correspond to full musical phrases (usually 3-10 words).

### CONTENT ACCURACY:
- Even when grouping, you MUST transcribe every single instance of the repetition.
- Audio: "No no no no no" -> Segment Text: "No no no no no" (Correct).
- Audio: "No no no no no" -> Segment Text: "No" (Incorrect).
""".strip()

# Gemini 3 style: shorter, relies on the model's reasoning budget.
LOGIC_HEAVY_PROMPT = """
Analyze the provided audio and generate a JSON array of subtitle segments.

### INSTRUCTIONS:
1. **Granularity**: Break segments by natural musical phrasing.
2. **Content Accuracy**: Transcribe every single instance of a repetition. Do not merge, skip or stop early.
3. **Precision**: Align 'start' to the first consonant/vowel of the phrase.
""".strip()

LINE_MODE_FORMAT = """
### OUTPUT FORMAT:
Return ONLY a JSON array of objects with the properties "start", "end", "text".
""".strip()

WORD_MODE_FORMAT = """
### OUTPUT FORMAT:
Return ONLY a JSON array of objects with the properties "start", "end", "text" and "words".
"words" lists every word (or CJK character block) of the segment in order, each with its own "start", "end" and "text".
Word timings must lie inside their segment.
""".strip()
