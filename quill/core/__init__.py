"""Scraping, enhancement and harvesting pipelines."""
