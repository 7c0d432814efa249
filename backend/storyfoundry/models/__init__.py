"""Records exchanged with Supabase"""
from storyfoundry.models.profile import Profile, Role
from storyfoundry.models.project import IPTimestamp, NewProject, Project
from storyfoundry.models.user import SessionUser

__all__ = ["Profile", "Role", "IPTimestamp", "NewProject", "Project", "SessionUser"]
