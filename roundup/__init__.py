"""
Comic review scraper for comicbookroundup.com.

This package resolves a publisher, a series and its issues on the review
site and extracts per-issue review metadata. Catalog navigation lives in
roundup.navigator; concurrent row extraction in roundup.driver.pipeline.
"""
