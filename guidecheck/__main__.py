import sys

from guidecheck.audit_docs import main

sys.exit(main())
