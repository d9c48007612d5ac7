from hillside.views.admin import (
    AnalyticsView,
    DashboardView,
    FeedbackView,
    ModulesView,
    PendingReviewsPanel,
    PendingUsersPanel,
    PrintMediaAdminView,
    PublicationsAdminView,
    SecurityView,
    SiteSettingsView,
    UsersAdminView,
)
from hillside.views.base import View
from hillside.views.site import (
    AboutView,
    ArticleDetailView,
    CategoryView,
    CommentThread,
    ContactView,
    HomeView,
    PrintArchiveView,
    ProfileView,
    SearchView,
)

__all__ = [
    "AboutView",
    "AnalyticsView",
    "ArticleDetailView",
    "CategoryView",
    "CommentThread",
    "ContactView",
    "DashboardView",
    "FeedbackView",
    "HomeView",
    "ModulesView",
    "PendingReviewsPanel",
    "PendingUsersPanel",
    "PrintArchiveView",
    "PrintMediaAdminView",
    "ProfileView",
    "PublicationsAdminView",
    "SearchView",
    "SecurityView",
    "SiteSettingsView",
    "UsersAdminView",
    "View",
]
