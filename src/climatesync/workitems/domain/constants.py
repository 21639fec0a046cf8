"""Work item field reference names and fixed values."""

FINGERPRINT_FIELD = "CodeClimate.Fingerprint"
TAGS_FIELD = "System.Tags"
TITLE_FIELD = "System.Title"
STATE_FIELD = "System.State"
FOUND_IN_FIELD = "Microsoft.VSTS.Build.FoundIn"
EFFORT_FIELD = "Microsoft.VSTS.Scheduling.Effort"
REPRO_STEPS_FIELD = "Microsoft.VSTS.TCM.ReproSteps"
ID_FIELD = "System.Id"
TEAM_PROJECT_FIELD = "System.TeamProject"

MARKER_TAG = "Code Climate"
INITIAL_STATE = "New"

# WIQL macro for the project the query is posted to.
CURRENT_PROJECT = "@project"

# Code Climate's remediation points per unit of effort.
REMEDIATION_POINTS_PER_EFFORT = 10000

# Resource areas relative to a scope base.
FIELDS_RESOURCE = "fields"
WIQL_RESOURCE = "wiql"
WORK_ITEMS_BATCH_RESOURCE = "workitemsbatch"
WORK_ITEMS_RESOURCE = "workitems"
