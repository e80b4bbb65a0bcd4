"""HTTP proxy exposing the adoption spreadsheet as JSON at `/api/sheets`."""
