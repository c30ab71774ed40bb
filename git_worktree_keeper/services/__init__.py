"""Services for discovering, scanning, classifying and removing worktrees."""
