"""JoinUP gamification service."""
