"""
API Schemas

Pydantic models shared by routers:
    - common.py: ErrorResponse, PageResponse, DeleteResponse
    - requests.py: Request bodies for compliance, quotes, equipment and tickets
"""
