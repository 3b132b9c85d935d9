cy = {
    "common": {
        "serviceName": "Gwrandawiadau llys a thribiwnlys",
        "errorSummaryTitle": "Mae yna broblem",
        "back": "Yn ôl",
        "continue": "Parhau",
        "confirm": "Cadarnhau",
        "cancel": "Canslo",
        "yes": "Ie",
        "no": "Na",
        "languageToggle": "English",
        "languageToggleCode": "en",
        "signIn": "Mewngofnodi",
        "signOut": "Allgofnodi",
        "home": "Hafan",
        "english": "Saesneg",
        "welsh": "Cymraeg",
        "bilingual": "Dwyieithog",
    },
    "errors": {
        "notFoundTitle": "Heb ddod o hyd i'r dudalen",
        "notFoundBody": "Os gwnaethoch deipio'r cyfeiriad gwe, gwiriwch ei fod yn gywir.",
        "artefactNotFoundBody": (
            "Rydych wedi ceisio gweld tudalen sydd ddim yn bodoli mwyach. Gallai hyn fod oherwydd "
            "bod y cyhoeddiad rydych yn ceisio'i weld wedi dod i ben."
        ),
        "findCourt": "Dod o hyd i lys neu dribiwnlys",
        "forbiddenTitle": "Nid oes gennych ganiatâd i weld y dudalen hon",
        "forbiddenBody": "Mewngofnodwch gyda chyfrif sydd â mynediad i'r dudalen hon.",
        "serverErrorTitle": "Mae'n ddrwg gennym, mae problem gyda'r gwasanaeth",
        "serverErrorBody": "Rhowch gynnig arall arni yn nes ymlaen.",
        "expiredTitle": "Mae'r cyhoeddiad hwn wedi dod i ben",
    },
    "start": {
        "title": "Gwrandawiadau llys a thribiwnlys",
        "lead": "Defnyddiwch y gwasanaeth hwn i ddod o hyd i restrau gwrandawiadau a gyhoeddir gan lysoedd a thribiwnlysoedd.",
        "courtLabel": "Dod o hyd i lys neu dribiwnlys",
        "continue": "Parhau",
    },
    "summaryOfPublications": {
        "title": "Beth ydych chi eisiau ei weld gan",
        "noPublications": "Mae'n ddrwg gennym, nid oes rhestrau ar gyfer y llys hwn",
        "missingLocation": "Dewiswch lys neu dribiwnlys i weld ei gyhoeddiadau",
    },
    "hearingList": {
        "listFor": "Rhestr ar gyfer",
        "lastUpdated": "Diweddarwyd ddiwethaf",
        "viewFile": "Gweld y rhestr",
        "download": "Lawrlwytho'r rhestr hon",
        "publishedOn": "Rhestr wedi'i chyhoeddi ar",
        "searchCases": "Chwilio yn ôl enw neu gyfeirnod",
        "postcode": "Cod post",
        "londonPostcodes": "Pob cod post yn Llundain",
        "prosecutor": "Erlynydd",
        "applyFilters": "Rhoi hidlwyr ar waith",
        "casesFound": "achos",
        "name": "Enw",
        "dateOfBirth": "Dyddiad geni",
        "age": "Oed",
        "reference": "Cyfeirnod",
        "address": "Cyfeiriad",
        "offence": "Trosedd",
        "reportingRestriction": "Cyfyngiad adrodd",
    },
    "subscriptionManagement": {
        "title": "Eich tanysgrifiadau e-bost",
        "addSubscription": "Ychwanegu tanysgrifiad e-bost",
        "bulkUnsubscribe": "Dad-danysgrifio swmp",
        "noSubscriptions": "Nid oes gennych unrhyw danysgrifiadau gweithredol",
        "courtOrTribunal": "Enw'r llys neu'r tribiwnlys",
        "caseName": "Enw'r achos",
        "caseReference": "Cyfeirnod",
        "dateAdded": "Dyddiad ychwanegu",
        "actions": "Camau gweithredu",
        "unsubscribe": "Dad-danysgrifio",
        "tabAll": "Pob tanysgrifiad",
        "tabCase": "Tanysgrifiadau yn ôl achos",
        "tabCourt": "Tanysgrifiadau yn ôl llys neu dribiwnlys",
        "listTypeSubscriptions": "Tanysgrifiadau math o restr",
        "listType": "Math o restr",
        "version": "Fersiwn",
        "remove": "Dileu",
    },
    "subscriptionAdd": {
        "title": "Tanysgrifio yn ôl enw llys neu dribiwnlys",
        "hint": "Dewiswch y llysoedd neu'r tribiwnlysoedd yr hoffech gael negeseuon e-bost amdanynt",
        "errorNoSelection": "Rhaid i chi danysgrifio i o leiaf un llys neu dribiwnlys",
        "success": "Mae eich tanysgrifiadau wedi cael eu diweddaru",
    },
    "deleteSubscription": {
        "title": "Ydych chi'n siŵr eich bod eisiau dileu'r tanysgrifiad hwn?",
        "errorNoSelection": "Dewiswch ie os ydych eisiau dileu'r tanysgrifiad hwn",
    },
    "unsubscribeConfirmation": {
        "title": "Tanysgrifiad wedi'i ddileu",
        "body": "Mae eich tanysgrifiad wedi cael ei ddileu.",
        "manage": "Rheoli eich tanysgrifiadau",
    },
    "bulkUnsubscribe": {
        "title": "Dad-danysgrifio swmp",
        "select": "Dewis",
        "errorNoSelection": "Rhaid dewis o leiaf un tanysgrifiad",
        "removeSubscriptions": "Dileu tanysgrifiadau",
    },
    "confirmBulkUnsubscribe": {
        "title": "Ydych chi'n siŵr eich bod eisiau dileu'r tanysgrifiadau hyn?",
        "errorNoSelection": "Dewiswch ie os ydych eisiau dileu'r tanysgrifiadau hyn",
    },
    "bulkUnsubscribeSuccess": {
        "title": "Tanysgrifiadau e-bost wedi'u diweddaru",
        "body": "Rydych wedi dileu'r tanysgrifiadau a ddewiswyd.",
        "manage": "Rheoli eich tanysgrifiadau",
    },
    "addJurisdiction": {
        "title": "Ychwanegu awdurdodaeth",
        "nameLabel": "Enw'r awdurdodaeth (Saesneg)",
        "welshNameLabel": "Enw'r awdurdodaeth (Cymraeg)",
        "successTitle": "Awdurdodaeth wedi'i hychwanegu",
        "successBody": "Mae'r awdurdodaeth wedi'i hychwanegu at y data cyfeirio.",
    },
    "addRegion": {
        "title": "Ychwanegu rhanbarth",
        "nameLabel": "Enw'r rhanbarth (Saesneg)",
        "welshNameLabel": "Enw'r rhanbarth (Cymraeg)",
        "successTitle": "Rhanbarth wedi'i ychwanegu",
        "successBody": "Mae'r rhanbarth wedi'i ychwanegu at y data cyfeirio.",
    },
    "addSubJurisdiction": {
        "title": "Ychwanegu is-awdurdodaeth",
        "jurisdictionLabel": "Awdurdodaeth",
        "selectJurisdiction": "Dewiswch awdurdodaeth",
        "nameLabel": "Enw'r is-awdurdodaeth (Saesneg)",
        "welshNameLabel": "Enw'r is-awdurdodaeth (Cymraeg)",
        "successTitle": "Is-awdurdodaeth wedi'i hychwanegu",
        "successBody": "Mae'r is-awdurdodaeth wedi'i hychwanegu at y data cyfeirio.",
    },
    "referenceData": {
        "addAnother": "Ychwanegu un arall",
        "home": "Dychwelyd i ddangosfwrdd gweinyddwr y system",
    },
    "removeList": {
        "searchTitle": "Dod o hyd i gynnwys i'w ddileu",
        "resultsTitle": "Dewiswch gynnwys i'w ddileu",
        "confirmationTitle": "Ydych chi'n siŵr eich bod eisiau dileu'r cynnwys hwn?",
        "successTitle": "Ffeil wedi'i dileu",
        "successBody": "Mae'r cynnwys a ddewiswyd wedi cael ei ddileu",
        "courtRequired": "Nid oes dim yn cyfateb i'ch meini prawf",
        "selectionRequired": "Dewiswch gynnwys i'w ddileu",
        "confirmationRequired": "Dewiswch ie os ydych eisiau dileu'r cynnwys hwn",
        "noResults": "Nid oes rhestrau ar gyfer y llys neu'r tribiwnlys hwn",
    },
    "auditLog": {
        "listTitle": "Log archwilio defnyddwyr",
        "detailTitle": "Cofnod log archwilio",
        "invalidEmail": "Rhowch gyfeiriad e-bost dilys",
        "invalidUserId": "Rhaid i ID y defnyddiwr fod yn alffaniwmerig a hyd at 50 nod",
        "invalidDate": "Rhowch ddyddiad dilys",
        "noResults": "Heb ddod o hyd i gofnodion log archwilio",
        "filters": "Hidlo",
        "applyFilters": "Defnyddio hidlwyr",
        "clearFilters": "Clirio hidlwyr",
        "timestamp": "Stamp amser",
        "email": "E-bost",
        "userId": "ID defnyddiwr",
        "action": "Cam gweithredu",
        "details": "Manylion",
        "view": "Gweld",
        "notFound": "Heb ddod o hyd i'r cofnod log archwilio",
    },
    "search": {
        "title": "Ym mha lys neu dribiwnlys y mae gennych ddiddordeb?",
        "label": "Chwilio yn ôl enw'r llys neu'r tribiwnlys",
        "hint": "Er enghraifft, Canolfan Llysoedd Cyfun Rhydychen",
        "noMatch": "Nid oes dim sy'n cyfateb i'ch meini prawf",
        "resultsTitle": "Llysoedd a thribiwnlysoedd sy'n cyfateb i'ch chwiliad",
        "browseAll": "Dewis o restr A-Z o lysoedd a thribiwnlysoedd",
    },
    "courtsTribunalsList": {
        "title": "Dod o hyd i lys neu dribiwnlys",
        "jurisdictionLegend": "Awdurdodaeth",
        "regionLegend": "Rhanbarth",
        "applyFilters": "Rhoi hidlwyr ar waith",
        "noResults": "Nid oes llysoedd na thribiwnlysoedd yn cyfateb i'ch hidlwyr",
    },
    "subscriptionAddMethod": {
        "title": "Sut ydych chi eisiau ychwanegu tanysgrifiad e-bost?",
        "court": "Yn ôl enw'r llys neu'r tribiwnlys",
        "caseName": "Yn ôl enw'r achos",
        "caseNumber": "Yn ôl cyfeirnod yr achos",
        "listType": "Yn ôl math o restr",
        "errorNoSelection": "Dewiswch sut ydych chi am ychwanegu tanysgrifiad e-bost.",
    },
    "caseNameSearch": {
        "title": "Yn ôl enw'r achos",
        "label": "Rhowch enw achos",
        "errorRequired": "Rhowch enw achos sydd o leiaf 3 nod",
        "errorNoResults": "Nid oes dim sy'n cyfateb i'ch meini prawf",
    },
    "caseNumberSearch": {
        "title": "Yn ôl cyfeirnod yr achos",
        "label": "Rhowch gyfeirnod achos",
        "errorRequired": "Rhowch gyfeirnod achos",
        "errorNoResults": "Nid oes dim sy'n cyfateb i'ch meini prawf",
    },
    "caseSearchResults": {
        "title": "Canlyniad chwilio",
        "select": "Dewis",
        "caseName": "Enw'r achos",
        "caseNumber": "Cyfeirnod",
        "errorNoSelection": "Dewiswch o leiaf un achos i barhau",
    },
    "pendingSubscriptions": {
        "title": "Cadarnhewch eich tanysgrifiadau e-bost",
        "courts": "Enw'r llys neu'r tribiwnlys",
        "cases": "Enw'r achos",
        "caseNumber": "Cyfeirnod",
        "remove": "Dileu",
        "confirmButton": "Cadarnhau tanysgrifiad",
        "confirmButtonPlural": "Cadarnhau tanysgrifiadau",
        "errorAtLeastOne": "Mae angen o leiaf un tanysgrifiad.",
        "addAnother": "Ychwanegu tanysgrifiad e-bost arall",
    },
    "subscriptionConfirmed": {
        "title": "Cadarnhad tanysgrifiad",
        "body": "Mae eich tanysgrifiadau e-bost wedi'u hychwanegu",
        "manage": "Rheoli eich tanysgrifiadau",
    },
    "subscriptionListTypes": {
        "title": "Dewis mathau o restrau",
        "hint": "Dewiswch y rhestrau rydych eisiau eu cael drwy e-bost",
        "errorNoSelection": "Dewiswch fath o restr i barhau",
    },
    "subscriptionListLanguage": {
        "title": "Pa fersiwn o'r rhestr ydych chi am ei derbyn?",
        "english": "Saesneg",
        "welsh": "Cymraeg",
        "both": "Cymraeg a Saesneg",
        "errorNoSelection": "Dewiswch fersiwn o'r rhestr i barhau",
    },
    "subscriptionConfirm": {
        "title": "Cadarnhewch eich tanysgrifiadau e-bost",
        "listTypes": "Math o restr",
        "version": "Fersiwn",
        "remove": "Dileu",
        "change": "Newid fersiwn",
        "errorNoListTypes": "Dewiswch fath o restr i barhau",
    },
    "deleteCourt": {
        "title": "Dod o hyd i'r llys i'w ddileu",
        "courtLabel": "Enw'r llys neu'r tribiwnlys",
        "errorCourtRequired": "Rhowch enw llys neu dribiwnlys",
        "confirmTitle": "Ydych chi'n siŵr eich bod eisiau dileu'r llys hwn?",
        "courtName": "Enw'r llys neu'r tribiwnlys",
        "locationType": "Math o leoliad",
        "court": "Llys",
        "jurisdiction": "Awdurdodaeth",
        "region": "Rhanbarth",
        "errorSelectYesNo": "Dewiswch ydw neu nac ydw i barhau",
        "errorActiveSubscriptions": "Mae tanysgrifiadau gweithredol ar gyfer y lleoliad a roddir.",
        "errorActiveArtefacts": "Mae arteffactau gweithredol ar gyfer y lleoliad a roddir.",
        "successTitle": "Wedi dileu'n llwyddiannus",
        "successPanel": "Mae'r llys wedi'i ddileu",
        "whatNext": "Beth ydych chi eisiau ei wneud nesaf?",
        "removeAnother": "Dileu llys arall",
        "uploadReferenceData": "Uwchlwytho Data Cyfeirio",
        "home": "Hafan",
    },
}
