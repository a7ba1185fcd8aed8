"""
Financial Health Score Service

A FastAPI-based microservice that scores a user's financial health from
0 to 1000 across Trajectory, Behavior and Position, explains the score
with ranked tips, and keeps one score per user per day for trend display.
"""

__version__ = "0.1.0"
