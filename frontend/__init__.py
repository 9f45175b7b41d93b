"""
frontend — client-side session handling and route guarding.
"""
