"""Automated smoke-run for formrelay.

Checks:
- loads .env
- renders scripts/sample_submission.json in markdown and notion modes via the CLI
- reports which sinks have their environment configured
- optionally submits the sample to the KV store (--submit-kv) and reads it back

Usage:
  python scripts/smoke_run.py [--submit-kv] [--ci]

Exit code: 0 on success (all checks), non-zero if any step fails.
"""

import os
import sys
import subprocess
import json
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()
ROOT = Path(__file__).resolve().parents[1]
PY = sys.executable

SAMPLE = ROOT / 'scripts' / 'sample_submission.json'
SINK_VARS = {
    'kv': ['KV_URL', 'KV_TOKEN'],
    'notion': ['NOTION_TOKEN', 'NOTION_DATABASE_ID'],
    'blob': ['BLOB_READ_WRITE_TOKEN'],
}


def run_cli(args, timeout=120):
    cmd = [PY, '-m', 'formrelay.cli'] + args
    print("\n>>> Running:", " ".join(cmd))
    p = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, cwd=ROOT)
    print("--- stdout ---")
    print(p.stdout[:8000])
    print("--- stderr ---")
    print(p.stderr[:8000])
    return p.returncode, p.stdout, p.stderr


if __name__ == '__main__':
    submit_kv = '--submit-kv' in sys.argv
    ci_mode = '--ci' in sys.argv

    print('Python:', PY)
    print('Project root:', ROOT)

    checks = {}
    for sink, names in SINK_VARS.items():
        configured = all(os.getenv(n) for n in names)
        checks[f'{sink}_configured'] = configured
        print(f'{sink} configured?', configured)

    # 1. render both modes
    rc, out, err = run_cli(['render', str(SAMPLE)])
    checks['render_markdown'] = rc == 0 and '# New Form Submission' in out
    rc, out, err = run_cli(['render', str(SAMPLE), '--mode', 'notion'])
    checks['render_notion'] = rc == 0

    # 2. optional: real KV round trip
    if submit_kv:
        rc, out, err = run_cli(['submit', str(SAMPLE), '--sink', 'kv'])
        checks['submit_kv'] = rc == 0
        if rc == 0:
            rc, out, err = run_cli(['fetch', 'demo-0001'])
            checks['fetch_kv'] = rc == 0 and 'demo-0001' in out
    else:
        print('\nSkipping KV submit; pass --submit-kv to write the sample submission')

    failed = not all(v for k, v in checks.items() if not k.endswith('_configured'))
    print('\nSMOKE RUN:', 'FAIL' if failed else 'SUCCESS')
    if ci_mode:
        print(json.dumps({"status": "fail" if failed else "success", "checks": checks}))
    sys.exit(2 if failed else 0)
