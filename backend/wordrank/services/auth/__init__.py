"""Authentication and session boundary.

tokens    signed, time-limited session tokens
principals  the closed Anonymous / Player / Admin union
resolver  request -> principal, re-reading the store on every call
guard     route decorators that gate a handler on a principal kind
"""
