"""
LabNote Backend - research notebook with projects, collaborators and entry history.

Entries live either in a personal "uncategorized" space or inside a project
shared with collaborators; every edit keeps the previous content as a version.

Version: 1.0.0
"""

__version__ = "1.0.0"
