"""Authenticated image uploads to Google Cloud Storage for the restaurant admin."""
