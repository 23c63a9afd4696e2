"""course_digest.scraper: degree structure and teaching page scraping."""
