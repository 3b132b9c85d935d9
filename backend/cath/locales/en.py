en = {
    "common": {
        "serviceName": "Court and tribunal hearings",
        "errorSummaryTitle": "There is a problem",
        "back": "Back",
        "continue": "Continue",
        "confirm": "Confirm",
        "cancel": "Cancel",
        "yes": "Yes",
        "no": "No",
        "languageToggle": "Cymraeg",
        "languageToggleCode": "cy",
        "signIn": "Sign in",
        "signOut": "Sign out",
        "home": "Home",
        "english": "English",
        "welsh": "Welsh",
        "bilingual": "Bilingual",
    },
    "errors": {
        "notFoundTitle": "Page not found",
        "notFoundBody": "If you typed the web address, check it is correct.",
        "artefactNotFoundBody": (
            "You have attempted to view a page that no longer exists. This could be because "
            "the publication you are trying to view has expired."
        ),
        "findCourt": "Find a court or tribunal",
        "forbiddenTitle": "You do not have permission to view this page",
        "forbiddenBody": "Sign in with an account that has access to this page.",
        "serverErrorTitle": "Sorry, there is a problem with the service",
        "serverErrorBody": "Try again later.",
        "expiredTitle": "This publication has expired",
    },
    "start": {
        "title": "Court and tribunal hearings",
        "lead": "Use this service to find hearing lists published by courts and tribunals.",
        "courtLabel": "Find a court or tribunal",
        "continue": "Continue",
    },
    "summaryOfPublications": {
        "title": "What do you want to view from",
        "noPublications": "Sorry, no lists found for this court",
        "missingLocation": "Select a court or tribunal to view its publications",
    },
    "hearingList": {
        "listFor": "List for",
        "lastUpdated": "Last updated",
        "viewFile": "View the list",
        "download": "Download this list",
        "publishedOn": "List published on",
        "searchCases": "Search by name or reference",
        "postcode": "Postcode",
        "londonPostcodes": "All London postcodes",
        "prosecutor": "Prosecutor",
        "applyFilters": "Apply filters",
        "casesFound": "cases",
        "name": "Name",
        "dateOfBirth": "Date of birth",
        "age": "Age",
        "reference": "Reference",
        "address": "Address",
        "offence": "Offence",
        "reportingRestriction": "Reporting restriction",
    },
    "subscriptionManagement": {
        "title": "Your email subscriptions",
        "addSubscription": "Add email subscription",
        "bulkUnsubscribe": "Bulk unsubscribe",
        "noSubscriptions": "You do not have any active subscriptions",
        "courtOrTribunal": "Court or tribunal name",
        "caseName": "Case name",
        "caseReference": "Reference number",
        "dateAdded": "Date added",
        "actions": "Actions",
        "unsubscribe": "Unsubscribe",
        "tabAll": "All subscriptions",
        "tabCase": "Subscriptions by case",
        "tabCourt": "Subscriptions by court or tribunal",
        "listTypeSubscriptions": "List type subscriptions",
        "listType": "List type",
        "version": "Version",
        "remove": "Remove",
    },
    "subscriptionAdd": {
        "title": "Subscribe by court or tribunal name",
        "hint": "Select the courts or tribunals you want to receive emails about",
        "errorNoSelection": "You must subscribe to at least one court or tribunal",
        "success": "Your subscriptions have been updated",
    },
    "deleteSubscription": {
        "title": "Are you sure you want to remove this subscription?",
        "errorNoSelection": "Select yes if you want to remove this subscription",
    },
    "unsubscribeConfirmation": {
        "title": "Subscription removed",
        "body": "Your subscription has been removed.",
        "manage": "Manage your subscriptions",
    },
    "bulkUnsubscribe": {
        "title": "Bulk unsubscribe",
        "select": "Select",
        "errorNoSelection": "At least one subscription must be selected",
        "removeSubscriptions": "Remove subscriptions",
    },
    "confirmBulkUnsubscribe": {
        "title": "Are you sure you want to remove these subscriptions?",
        "errorNoSelection": "Select yes if you want to remove these subscriptions",
    },
    "bulkUnsubscribeSuccess": {
        "title": "Email subscriptions updated",
        "body": "You have removed the selected subscriptions.",
        "manage": "Manage your subscriptions",
    },
    "addJurisdiction": {
        "title": "Add jurisdiction",
        "nameLabel": "Jurisdiction name (English)",
        "welshNameLabel": "Jurisdiction name (Welsh)",
        "successTitle": "Jurisdiction added",
        "successBody": "The jurisdiction has been added to the reference data.",
    },
    "addRegion": {
        "title": "Add region",
        "nameLabel": "Region name (English)",
        "welshNameLabel": "Region name (Welsh)",
        "successTitle": "Region added",
        "successBody": "The region has been added to the reference data.",
    },
    "addSubJurisdiction": {
        "title": "Add sub jurisdiction",
        "jurisdictionLabel": "Jurisdiction",
        "selectJurisdiction": "Select a jurisdiction",
        "nameLabel": "Sub jurisdiction name (English)",
        "welshNameLabel": "Sub jurisdiction name (Welsh)",
        "successTitle": "Sub jurisdiction added",
        "successBody": "The sub jurisdiction has been added to the reference data.",
    },
    "referenceData": {
        "addAnother": "Add another",
        "home": "Return to the system admin dashboard",
    },
    # Admin pages are English only
    "manualUpload": {
        "title": "Manual upload",
        "summaryTitle": "File upload summary",
        "successTitle": "File upload successful",
        "successBody": "Your file has been uploaded",
        "fileHint": "Manually upload a csv, doc, docx, htm, html, json, or pdf file, max size 2MB",
        "errorMessages": {
            "fileRequired": "Please provide a file",
            "fileType": "Please upload a valid file format",
            "fileSize": "File too large, please upload file smaller than 2MB",
            "courtRequired": "Please enter and select a valid court",
            "courtTooShort": "Court name must be three characters or more",
            "listTypeRequired": "Please select a list type",
            "hearingStartDateRequired": "Please enter a valid hearing start date",
            "hearingStartDateInvalid": "Please enter a valid hearing start date",
            "sensitivityRequired": "Please select a sensitivity",
            "languageRequired": "Select a language",
            "displayFromRequired": "Please enter a valid display file from date",
            "displayFromInvalid": "Please enter a valid display file from date",
            "displayToRequired": "Please enter a valid display file to date",
            "displayToInvalid": "Please enter a valid display file to date",
            "displayToBeforeFrom": "Display to date must be after display from date",
        },
    },
    "nonStrategicUpload": {
        "title": "Upload Excel file",
        "summaryTitle": "File upload summary",
        "successTitle": "File upload successful",
        "successBody": "Your file has been uploaded",
        "fileHint": "Upload an xlsx file, max size 2MB",
        "errorMessages": {
            "fileRequired": "Please provide a file",
            "fileType": "Please upload a valid file format",
            "fileSize": "File too large, please upload file smaller than 2MB",
            "courtRequired": "Please enter and select a valid court",
            "courtTooShort": "Court name must be three characters or more",
            "listTypeRequired": "Please select a list type",
            "hearingStartDateRequired": "Please enter a valid hearing start date",
            "hearingStartDateInvalid": "Please enter a valid hearing start date",
            "sensitivityRequired": "Please select a sensitivity",
            "languageRequired": "Select a language",
            "displayFromRequired": "Please enter a valid display file from date",
            "displayFromInvalid": "Please enter a valid display file from date",
            "displayToRequired": "Please enter a valid display file to date",
            "displayToInvalid": "Please enter a valid display file to date",
            "displayToBeforeFrom": "Display to date must be after display from date",
        },
    },
    "referenceDataUpload": {
        "title": "Reference data upload",
        "fileHint": "Upload a csv file, max size 2MB",
        "summaryTitle": "File upload summary",
        "confirmationTitle": "Upload confirmed",
        "confirmationBody": "Reference data has been updated",
        "fileRequired": "Select a file to upload",
        "fileType": "The selected file must be a CSV",
        "fileSize": "File too large, please upload file smaller than 2MB",
        "sessionExpired": "Your upload has expired, please upload the file again",
    },
    "removeList": {
        "searchTitle": "Find content to remove",
        "resultsTitle": "Select content to remove",
        "confirmationTitle": "Are you sure you want to remove this content?",
        "successTitle": "File removed",
        "successBody": "The selected content has been removed",
        "courtRequired": "There is nothing matching your criteria",
        "selectionRequired": "Please select content to remove",
        "confirmationRequired": "Select yes if you want to remove this content",
        "noResults": "There are no lists for this court or tribunal",
    },
    "auditLog": {
        "listTitle": "User audit log",
        "detailTitle": "Audit log entry",
        "invalidEmail": "Enter a valid email address",
        "invalidUserId": "User ID must be alphanumeric and up to 50 characters",
        "invalidDate": "Enter a valid date",
        "noResults": "No audit log entries found",
        "filters": "Filter",
        "applyFilters": "Apply filters",
        "clearFilters": "Clear filters",
        "timestamp": "Timestamp",
        "email": "Email",
        "userId": "User ID",
        "action": "Action",
        "details": "Details",
        "view": "View",
        "notFound": "Audit log entry not found",
    },
    "search": {
        "title": "What court or tribunal are you interested in?",
        "label": "Search by court or tribunal name",
        "hint": "For example, Oxford Combined Court Centre",
        "noMatch": "There is nothing matching your criteria",
        "resultsTitle": "Courts and tribunals matching your search",
        "browseAll": "Select from an A-Z list of courts and tribunals",
    },
    "courtsTribunalsList": {
        "title": "Find a court or tribunal",
        "jurisdictionLegend": "Jurisdiction",
        "regionLegend": "Region",
        "applyFilters": "Apply filters",
        "noResults": "There are no courts or tribunals matching your filters",
    },
    "subscriptionAddMethod": {
        "title": "How do you want to add an email subscription?",
        "court": "By court or tribunal name",
        "caseName": "By case name",
        "caseNumber": "By case reference number",
        "listType": "By list type",
        "errorNoSelection": "Select how you want to add an email subscription.",
    },
    "caseNameSearch": {
        "title": "By case name",
        "label": "Enter a case name",
        "errorRequired": "Enter a case name of at least 3 characters",
        "errorNoResults": "There is nothing matching your criteria",
    },
    "caseNumberSearch": {
        "title": "By case reference number",
        "label": "Enter a case reference number",
        "errorRequired": "Enter a case reference number",
        "errorNoResults": "There is nothing matching your criteria",
    },
    "caseSearchResults": {
        "title": "Search result",
        "select": "Select",
        "caseName": "Case name",
        "caseNumber": "Reference number",
        "errorNoSelection": "Select at least one case to continue",
    },
    "pendingSubscriptions": {
        "title": "Confirm your email subscriptions",
        "courts": "Court or tribunal name",
        "cases": "Case name",
        "caseNumber": "Reference number",
        "remove": "Remove",
        "confirmButton": "Confirm subscription",
        "confirmButtonPlural": "Confirm subscriptions",
        "errorAtLeastOne": "At least one subscription is needed.",
        "addAnother": "Add another email subscription",
    },
    "subscriptionConfirmed": {
        "title": "Subscription confirmation",
        "body": "Your email subscriptions have been added",
        "manage": "Manage your subscriptions",
    },
    "subscriptionListTypes": {
        "title": "Select list types",
        "hint": "Select the lists you want to receive by email",
        "errorNoSelection": "Please select a list type to continue",
    },
    "subscriptionListLanguage": {
        "title": "What version of the list type do you want to receive?",
        "english": "English",
        "welsh": "Welsh",
        "both": "English and Welsh",
        "errorNoSelection": "Please select version of the list type to continue",
    },
    "subscriptionConfirm": {
        "title": "Confirm your email subscriptions",
        "listTypes": "List type",
        "version": "Version",
        "remove": "Remove",
        "change": "Change version",
        "errorNoListTypes": "Please select a list type to continue",
    },
    "deleteCourt": {
        "title": "Find the court to remove",
        "courtLabel": "Court or tribunal name",
        "errorCourtRequired": "Enter a court or tribunal name",
        "confirmTitle": "Are you sure you want to delete this court?",
        "courtName": "Court or tribunal name",
        "locationType": "Location type",
        "court": "Court",
        "jurisdiction": "Jurisdiction",
        "region": "Region",
        "errorSelectYesNo": "Select yes or no to continue",
        "errorActiveSubscriptions": "There are active subscriptions for the given location.",
        "errorActiveArtefacts": "There are active artefacts for the given location.",
        "successTitle": "Delete successful",
        "successPanel": "Court has been deleted",
        "whatNext": "What do you want to do next?",
        "removeAnother": "Remove another court",
        "uploadReferenceData": "Upload Reference Data",
        "home": "Home",
    },
}
