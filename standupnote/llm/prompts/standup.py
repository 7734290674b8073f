"""Stand-up summary prompt template.

The activity section and the JSON response schema are rendered by
standupnote.prompt and substituted into USER_PROMPT_TEMPLATE_STANDUP.
"""

NO_TICKET_HEADING = "Other Work (no ticket identified)"

# Placeholder values shown to the model for each top-level response key
RESPONSE_FIELD_DESCRIPTIONS = {
    "summary": "A 1-2 sentence high-level overview mentioning the main tickets and key accomplishments",
    "untracked": ["Description of work not associated with a ticket, with technical details"],
    "bulletPoints": ["Overall key points for quick stand-up delivery"],
    "highlights": ["Major achievement or notable technical accomplishment - mention ticket IDs"],
}

# Placeholder values shown to the model for each ticket entry
TICKET_FIELD_DESCRIPTIONS = {
    "summary": "Detailed description of what was accomplished (based on code analysis)",
    "bulletPoints": ["Specific implementation detail 1", "Specific implementation detail 2"],
    "codeInsights": ["Technical insight about the code changes"],
    "filesChanged": ["key-file-1.py", "key-file-2.ts"],
}

USER_PROMPT_TEMPLATE_STANDUP = """Summarize the following development activity from the previous working day for a stand-up meeting.
Your summary must be ORGANIZED BY TICKET and provide MEANINGFUL CODE-LEVEL INSIGHTS, not just commit titles.

[ACTIVITY]
Tickets: {ticket_count}
Commits: {commit_count}
{activity}

[GUIDELINES]
1. Structure your response around tickets - each ticket gets its own summary
2. Analyze the CODE CHANGES shown in the diffs to understand what was implemented
3. Do not just repeat commit messages - synthesize what was actually built or fixed
4. Identify patterns: new features, bug fixes, refactoring, API changes, UI updates
5. For each ticket, describe the business value or technical improvement achieved
6. Put work from "{no_ticket_heading}" in "untracked"
7. Use past tense and keep bullet points concise and action-oriented
8. Mention which tickets look complete vs in progress when the PR state shows it

[OUTPUT SCHEMA]
Return a JSON object with exactly this structure. Use exactly these field names.
Include one "tickets" entry for each of these ticket IDs: {ticket_ids}
{response_schema}

Output ONLY the JSON object:"""
