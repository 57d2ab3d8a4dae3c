"""Selector schema for comicbookroundup.com listing pages.

All patterns are compiled at import time. A typo here raises
SelectorPatternException on ``import roundup.common.selectors`` rather than
while a page is being processed.
"""

from roundup.common.document import SelectorPattern

# Listing pages
PUBLISHER_LINK = SelectorPattern(
    "div.section > table > tbody > tr .top-publisher a", "publisher links"
)
SERIES_LINK = SelectorPattern("td.series > a", "series links")
ISSUE_ROW = SelectorPattern("div.section > table > tbody > tr", "issue rows")
HEADER_CELL = SelectorPattern("th", "header cells")

# Fields within one issue row
ISSUE_NUMBER = SelectorPattern(".issue a", "issue number")
ISSUE_LINK = SelectorPattern(".issue a[href]", "issue link")
WRITER = SelectorPattern(".writer a", "writer")
ARTIST = SelectorPattern(".artist a", "artist")
CRITIC_RATING = SelectorPattern(
    ".rating .CriticRatingList div", "critic rating"
)
USER_RATING = SelectorPattern(".rating .UserRatingList div", "user rating")
CRITIC_REVIEW_COUNT = SelectorPattern(
    ".reviews .CriticReviewNumList a", "critic review count"
)
USER_REVIEW_COUNT = SelectorPattern(
    ".reviews .UserReviewNumList a", "user review count"
)
