"""
Visit history for signed-in users.

Responsibilities:
- Record the restaurants a user has visited.
- Answer the visited-name and visit-count questions asked by the picker.
- Short-circuit anonymous users to an empty history.
"""
