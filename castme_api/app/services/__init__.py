"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services
validate their arguments and talk to the document store; API handlers
only translate between HTTP and service calls.
"""
